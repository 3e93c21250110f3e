"""Editor timeline domain model.

A timeline holds ordered tracks, each track holds clips placed on the time
axis, and text overlays float above everything. The model is persisted as JSON
on the project and can be flattened into the clip list the export pipeline
consumes.
"""

from __future__ import annotations

from typing import Any, Callable, List, Literal, Optional
from uuid import uuid4

from pydantic import Field, model_validator

from ..base import CamelSchema
from .enums import TrackType

MIN_ZOOM = 10
MAX_ZOOM = 500


def _short_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


class ClipTransforms(CamelSchema):
    x: float = 0
    y: float = 0
    scale: float = 1
    rotation: float = 0
    opacity: float = Field(default=1, ge=0, le=1)


class ClipEffects(CamelSchema):
    filters: List[str] = Field(default_factory=list)
    speed: float = Field(default=1, gt=0)
    volume: float = Field(default=1, ge=0)
    fade_in: float = Field(default=0, ge=0)
    fade_out: float = Field(default=0, ge=0)


class TimelineClip(CamelSchema):
    """A span of an asset placed on a track.

    ``start_ms``/``end_ms`` position the clip on the timeline. ``trim_start_ms``
    is the offset into the source media where playback begins.
    """

    id: str = Field(default_factory=lambda: _short_id("clip"))
    asset_id: Optional[str] = None
    start_ms: int = Field(ge=0)
    end_ms: int = Field(ge=0)
    trim_start_ms: int = Field(default=0, ge=0)
    trim_end_ms: int = Field(default=0, ge=0)
    transforms: ClipTransforms = Field(default_factory=ClipTransforms)
    effects: ClipEffects = Field(default_factory=ClipEffects)

    @model_validator(mode="after")
    def _check_span(self) -> "TimelineClip":
        if self.end_ms <= self.start_ms:
            raise ValueError("clip end_ms must be greater than start_ms")
        return self

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


class TimelineTrack(CamelSchema):
    id: str = Field(default_factory=lambda: _short_id("track"))
    type: TrackType
    order: int = 0
    muted: bool = False
    volume: float = Field(default=1, ge=0)
    locked: bool = False
    clips: List[TimelineClip] = Field(default_factory=list)


class TextOverlay(CamelSchema):
    """Text drawn over the video. ``x``/``y`` are percentages of the frame."""

    id: str = Field(default_factory=lambda: _short_id("text"))
    text: str
    font_family: str = "Inter"
    font_size: int = Field(default=48, gt=0)
    font_weight: Literal["normal", "bold"] = "normal"
    font_style: Literal["normal", "italic"] = "normal"
    color: str = "#ffffff"
    background_color: Optional[str] = None
    x: float = Field(default=50, ge=0, le=100)
    y: float = Field(default=50, ge=0, le=100)
    text_align: Literal["left", "center", "right"] = "center"
    start_ms: int = Field(default=0, ge=0)
    end_ms: int = Field(default=3000, ge=0)
    animation: Literal["none", "fade", "slide-up", "slide-down", "typewriter"] = "none"


class ExportClip(CamelSchema):
    """A source file span to render, in seconds."""

    local_path: str = Field(min_length=1)
    start_time: float = Field(ge=0)
    end_time: float

    @model_validator(mode="after")
    def _check_span(self) -> "ExportClip":
        if self.end_time <= self.start_time:
            raise ValueError("clip endTime must be greater than startTime")
        return self


class ExportSettings(CamelSchema):
    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    fps: int = Field(default=30, gt=0)


class ExportTimeline(CamelSchema):
    """Flattened timeline consumed by the export pipeline."""

    clips: List[ExportClip] = Field(min_length=1)
    settings: ExportSettings = Field(default_factory=ExportSettings)


class EditorTimeline(CamelSchema):
    """Mutable editor timeline with the editing operations of the web editor."""

    duration_ms: int = 0
    zoom_level: int = 100
    tracks: List[TimelineTrack] = Field(default_factory=list)
    text_overlays: List[TextOverlay] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "EditorTimeline":
        """A fresh timeline with one video and one audio track."""
        return cls(
            tracks=[
                TimelineTrack(id="track-video-1", type=TrackType.VIDEO, order=0),
                TimelineTrack(id="track-audio-1", type=TrackType.AUDIO, order=1),
            ]
        )

    # Tracks

    def get_track(self, track_id: str) -> TimelineTrack:
        for track in self.tracks:
            if track.id == track_id:
                return track
        raise KeyError(f"track not found: {track_id!r}")

    def add_track(self, track_type: TrackType) -> TimelineTrack:
        track = TimelineTrack(
            id=_short_id(f"track-{track_type.value.lower()}"),
            type=track_type,
            order=len(self.tracks),
        )
        self.tracks.append(track)
        return track

    def remove_track(self, track_id: str) -> None:
        self.tracks = [t for t in self.tracks if t.id != track_id]
        self.recalculate_duration()

    def update_track(self, track_id: str, **updates: Any) -> TimelineTrack:
        track = self.get_track(track_id)
        updated = track.model_copy(update=updates)
        self.tracks = [updated if t.id == track_id else t for t in self.tracks]
        return updated

    # Clips

    def get_clip(self, track_id: str, clip_id: str) -> TimelineClip:
        for clip in self.get_track(track_id).clips:
            if clip.id == clip_id:
                return clip
        raise KeyError(f"clip not found: {clip_id!r}")

    def add_clip(self, track_id: str, clip: TimelineClip) -> str:
        self.get_track(track_id).clips.append(clip)
        self.recalculate_duration()
        return clip.id

    def remove_clip(self, track_id: str, clip_id: str) -> None:
        track = self.get_track(track_id)
        track.clips = [c for c in track.clips if c.id != clip_id]
        self.recalculate_duration()

    def update_clip(self, track_id: str, clip_id: str, **updates: Any) -> TimelineClip:
        track = self.get_track(track_id)
        current = self.get_clip(track_id, clip_id)
        updated = TimelineClip.model_validate({**current.model_dump(), **updates})
        track.clips = [updated if c.id == clip_id else c for c in track.clips]
        self.recalculate_duration()
        return updated

    def move_clip(self, from_track_id: str, to_track_id: str, clip_id: str, new_start_ms: int) -> TimelineClip:
        """Move a clip to ``new_start_ms`` on another (or the same) track, keeping its duration."""
        clip = self.get_clip(from_track_id, clip_id)
        destination = self.get_track(to_track_id)
        start = max(0, new_start_ms)
        moved = clip.model_copy(update={"start_ms": start, "end_ms": start + clip.duration_ms})

        source = self.get_track(from_track_id)
        source.clips = [c for c in source.clips if c.id != clip_id]
        destination.clips.append(moved)
        self.recalculate_duration()
        return moved

    def recalculate_duration(self) -> int:
        self.duration_ms = max((clip.end_ms for track in self.tracks for clip in track.clips), default=0)
        return self.duration_ms

    def set_zoom(self, level: int) -> int:
        self.zoom_level = max(MIN_ZOOM, min(MAX_ZOOM, level))
        return self.zoom_level

    # Text overlays

    def add_text_overlay(self, overlay: TextOverlay) -> str:
        self.text_overlays.append(overlay)
        return overlay.id

    def update_text_overlay(self, overlay_id: str, **updates: Any) -> TextOverlay:
        for index, overlay in enumerate(self.text_overlays):
            if overlay.id == overlay_id:
                updated = TextOverlay.model_validate({**overlay.model_dump(), **updates})
                self.text_overlays[index] = updated
                return updated
        raise KeyError(f"text overlay not found: {overlay_id!r}")

    def remove_text_overlay(self, overlay_id: str) -> None:
        self.text_overlays = [o for o in self.text_overlays if o.id != overlay_id]

    # Export

    def to_export_timeline(
        self,
        resolve_asset_path: Callable[[str], str],
        settings: Optional[ExportSettings] = None,
    ) -> ExportTimeline:
        """Flatten video-track clips into an :class:`ExportTimeline`.

        Clips are taken from unmuted video tracks in track order and sorted by
        their timeline start. ``resolve_asset_path`` maps an asset id to the
        local file backing it.
        """
        video_tracks = sorted(
            (t for t in self.tracks if t.type == TrackType.VIDEO and not t.muted),
            key=lambda t: t.order,
        )
        clips = sorted(
            (clip for track in video_tracks for clip in track.clips if clip.asset_id),
            key=lambda c: c.start_ms,
        )
        export_clips = [
            ExportClip(
                local_path=resolve_asset_path(clip.asset_id),
                start_time=clip.trim_start_ms / 1000,
                end_time=(clip.trim_start_ms + clip.duration_ms) / 1000,
            )
            for clip in clips
        ]
        return ExportTimeline(clips=export_clips, settings=settings or ExportSettings())
