"""
Application services.

Services hold the business rules behind the routers. Each one is built per
request from the request's database session; the external gateways
(Turnstile, Xendit, ffmpeg) are exposed as overridable dependencies.
"""
