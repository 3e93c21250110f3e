"""Upload I/O models."""

from __future__ import annotations

from ..base import CamelSchema


class UploadResult(CamelSchema):
    filename: str
    filepath: str
    mimetype: str
    size: int
