"""Domain models: enums, subscription tier rules and the editor timeline."""

from .enums import (
    AssetType,
    ExportFormat,
    ExportResolution,
    ExportStatus,
    PaymentStatus,
    ProjectStatus,
    PromptType,
    SubscriptionStatus,
    SubscriptionTier,
    TrackType,
    UserRole,
)
from .timeline import (
    ClipEffects,
    ClipTransforms,
    EditorTimeline,
    ExportClip,
    ExportSettings,
    ExportTimeline,
    TextOverlay,
    TimelineClip,
    TimelineTrack,
)

__all__ = [
    "AssetType",
    "ClipEffects",
    "ClipTransforms",
    "EditorTimeline",
    "ExportClip",
    "ExportFormat",
    "ExportResolution",
    "ExportSettings",
    "ExportStatus",
    "ExportTimeline",
    "PaymentStatus",
    "ProjectStatus",
    "PromptType",
    "SubscriptionStatus",
    "SubscriptionTier",
    "TextOverlay",
    "TimelineClip",
    "TimelineTrack",
    "TrackType",
    "UserRole",
]
