"""Vibe Creator.

Backend for a short-form video creation platform. Creators register, organise
their work in projects, build reusable AI prompts, upload clips and render
them into finished videos through a queued export pipeline. Paid tiers are
sold through Xendit invoices and unlock larger export quotas and resolutions.

Core subpackages
----------------

- ``vibe_creator.core``: logging, monitoring, security helpers, the SQLModel
  entities and async repositories, and the domain/IO models.
- ``vibe_creator.prompt_builder``: text templates turning structured creator
  briefs into prompts for AI tools.
- ``vibe_creator.server``: the FastAPI application, its routers and services.
- ``vibe_creator.client``: an HTTP client reproducing the editor's export flow.
"""

__version__ = "1.0.0"
