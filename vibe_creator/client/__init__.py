"""HTTP client for the Vibe Creator export API."""

from .client import ExportApiClient
from .errors import ExportClientError, ExportFailedError, ExportTimeoutError

__all__ = [
    "ExportApiClient",
    "ExportClientError",
    "ExportFailedError",
    "ExportTimeoutError",
]
