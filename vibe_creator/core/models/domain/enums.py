"""Domain enums shared by entities, services and API schemas."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Account role. Admins bypass export quotas and may use the admin API."""

    USER = "USER"
    ADMIN = "ADMIN"


class SubscriptionTier(str, Enum):
    """Paid plan a user is on."""

    FREE = "FREE"
    CREATOR = "CREATOR"
    PRO = "PRO"


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Invoice state as reported by the payment gateway."""

    PENDING = "PENDING"
    PAID = "PAID"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


class ExportStatus(str, Enum):
    """
    Lifecycle of an export job.

    A job is created ``QUEUED``, moves to ``PROCESSING`` once the worker picks
    it up and ends in either ``COMPLETED`` or ``FAILED``.
    """

    QUEUED = "QUEUED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ExportFormat(str, Enum):
    MP4 = "MP4"
    WEBM = "WEBM"
    MOV = "MOV"


class ExportResolution(str, Enum):
    """Output resolution, ordered from lowest to highest."""

    SD = "SD"
    HD = "HD"
    UHD = "UHD"


class PromptType(str, Enum):
    """Kind of AI prompt a creator can build."""

    SCRIPT = "SCRIPT"
    VOICE = "VOICE"
    VIDEO_GEN = "VIDEO_GEN"
    IMAGE = "IMAGE"
    RELAXING = "RELAXING"
    CREATIVE_SCAN = "CREATIVE_SCAN"


class ProjectStatus(str, Enum):
    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"


class AssetType(str, Enum):
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    IMAGE = "IMAGE"
    VOICE = "VOICE"


class TrackType(str, Enum):
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    TEXT = "TEXT"
    OVERLAY = "OVERLAY"
