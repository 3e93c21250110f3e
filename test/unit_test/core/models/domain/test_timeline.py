"""Unit tests for the editor timeline model."""

import pytest
from pydantic import ValidationError

from vibe_creator.core.models.domain.enums import TrackType
from vibe_creator.core.models.domain.timeline import (
    MAX_ZOOM,
    MIN_ZOOM,
    EditorTimeline,
    ExportClip,
    ExportSettings,
    TextOverlay,
    TimelineClip,
)


@pytest.fixture
def timeline() -> EditorTimeline:
    return EditorTimeline.default()


class TestTracks:
    def test_default_tracks(self, timeline):
        assert [(t.id, t.type, t.order) for t in timeline.tracks] == [
            ("track-video-1", TrackType.VIDEO, 0),
            ("track-audio-1", TrackType.AUDIO, 1),
        ]
        assert timeline.duration_ms == 0
        assert timeline.zoom_level == 100

    def test_add_track(self, timeline):
        track = timeline.add_track(TrackType.TEXT)

        assert track.id.startswith("track-text-")
        assert track.order == 2

    def test_remove_track_recalculates(self, timeline):
        timeline.add_clip("track-video-1", TimelineClip(start_ms=0, end_ms=9000))

        timeline.remove_track("track-video-1")

        assert timeline.duration_ms == 0

    def test_update_track(self, timeline):
        updated = timeline.update_track("track-audio-1", muted=True, volume=0.5)

        assert timeline.get_track("track-audio-1") is updated
        assert updated.muted is True

    def test_unknown_track(self, timeline):
        with pytest.raises(KeyError):
            timeline.get_track("nope")


class TestClips:
    def test_add_clip_extends_duration(self, timeline):
        clip_id = timeline.add_clip("track-video-1", TimelineClip(start_ms=1000, end_ms=4000))
        timeline.add_clip("track-audio-1", TimelineClip(start_ms=0, end_ms=6000))

        assert clip_id.startswith("clip-")
        assert timeline.duration_ms == 6000

    def test_clip_span_must_be_positive(self):
        with pytest.raises(ValidationError):
            TimelineClip(start_ms=5000, end_ms=5000)

    def test_update_clip_validates(self, timeline):
        clip_id = timeline.add_clip("track-video-1", TimelineClip(start_ms=0, end_ms=2000))

        updated = timeline.update_clip("track-video-1", clip_id, end_ms=8000)
        assert updated.end_ms == 8000
        assert timeline.duration_ms == 8000

        with pytest.raises(ValidationError):
            timeline.update_clip("track-video-1", clip_id, end_ms=0)

    def test_move_clip_keeps_duration(self, timeline):
        clip_id = timeline.add_clip("track-video-1", TimelineClip(start_ms=1000, end_ms=3000))

        moved = timeline.move_clip("track-video-1", "track-audio-1", clip_id, -500)

        assert (moved.start_ms, moved.end_ms) == (0, 2000)
        assert timeline.get_track("track-video-1").clips == []
        assert timeline.get_clip("track-audio-1", clip_id) == moved
        assert timeline.duration_ms == 2000

    def test_remove_clip(self, timeline):
        clip_id = timeline.add_clip("track-video-1", TimelineClip(start_ms=0, end_ms=2000))

        timeline.remove_clip("track-video-1", clip_id)

        assert timeline.duration_ms == 0
        with pytest.raises(KeyError):
            timeline.get_clip("track-video-1", clip_id)


class TestZoomAndOverlays:
    @pytest.mark.parametrize("level,expected", [(5, MIN_ZOOM), (150, 150), (900, MAX_ZOOM)])
    def test_zoom_is_clamped(self, timeline, level, expected):
        assert timeline.set_zoom(level) == expected

    def test_text_overlays(self, timeline):
        overlay_id = timeline.add_text_overlay(TextOverlay(text="Hello"))

        updated = timeline.update_text_overlay(overlay_id, text="Halo", y=80)
        assert (updated.text, updated.y) == ("Halo", 80)

        timeline.remove_text_overlay(overlay_id)
        assert timeline.text_overlays == []

        with pytest.raises(KeyError):
            timeline.update_text_overlay(overlay_id, text="x")

    def test_overlay_position_is_a_percentage(self):
        with pytest.raises(ValidationError):
            TextOverlay(text="x", x=120)


class TestSerialization:
    def test_camel_case_round_trip(self, timeline):
        timeline.add_clip("track-video-1", TimelineClip(asset_id="a1", start_ms=0, end_ms=1000, trim_start_ms=250))

        data = timeline.model_dump(by_alias=True, mode="json")

        assert data["durationMs"] == 1000
        clip = data["tracks"][0]["clips"][0]
        assert clip["assetId"] == "a1"
        assert clip["trimStartMs"] == 250
        assert EditorTimeline.model_validate(data) == timeline


class TestExportTimeline:
    def test_flattens_video_clips_in_start_order(self, timeline):
        timeline.add_clip("track-video-1", TimelineClip(asset_id="b", start_ms=4000, end_ms=6000, trim_start_ms=500))
        timeline.add_clip("track-video-1", TimelineClip(asset_id="a", start_ms=0, end_ms=4000))
        timeline.add_clip("track-video-1", TimelineClip(start_ms=6000, end_ms=7000))
        timeline.add_clip("track-audio-1", TimelineClip(asset_id="music", start_ms=0, end_ms=7000))

        export = timeline.to_export_timeline(lambda asset_id: f"temp/{asset_id}.mp4", ExportSettings(fps=24))

        assert [(c.local_path, c.start_time, c.end_time) for c in export.clips] == [
            ("temp/a.mp4", 0.0, 4.0),
            ("temp/b.mp4", 0.5, 2.5),
        ]
        assert export.settings.fps == 24

    def test_muted_tracks_are_skipped(self, timeline):
        timeline.add_clip("track-video-1", TimelineClip(asset_id="a", start_ms=0, end_ms=1000))
        track = timeline.add_track(TrackType.VIDEO)
        timeline.add_clip(track.id, TimelineClip(asset_id="b", start_ms=0, end_ms=1000))
        timeline.update_track(track.id, muted=True)

        export = timeline.to_export_timeline(lambda asset_id: asset_id)

        assert [c.local_path for c in export.clips] == ["a"]

    def test_nothing_to_export(self, timeline):
        with pytest.raises(ValidationError):
            timeline.to_export_timeline(lambda asset_id: asset_id)

    def test_export_clip_span(self):
        with pytest.raises(ValidationError):
            ExportClip(local_path="a.mp4", start_time=3, end_time=1)
