"""
Application-wide constants.
"""

PROJECT_NAME = "Vibe Creator"
API_V1_STR = "/api/v1"
VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

MAX_PENDING_EXPORTS = 3
EXPORT_RETENTION_HOURS = 24
EXPORT_HISTORY_LIMIT = 10
PAYMENT_HISTORY_LIMIT = 20

WATERMARK_TEXT = "Made with VibeCreator"
