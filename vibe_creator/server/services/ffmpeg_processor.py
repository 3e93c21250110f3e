"""
Server-side video processing with ffmpeg.

Wraps ``ffmpeg-python`` graphs for the three steps of an export: trimming
source clips, concatenating them and burning in the watermark. ffmpeg runs
in a worker thread so the event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple

import ffmpeg

from vibe_creator.core.models.domain import ExportResolution
from vibe_creator.server.core.constant import WATERMARK_TEXT

logger = logging.getLogger(__name__)

RESOLUTION_SIZES: Dict[ExportResolution, Tuple[int, int]] = {
    ExportResolution.SD: (854, 480),
    ExportResolution.HD: (1920, 1080),
    ExportResolution.UHD: (3840, 2160),
}

_ENCODE_OPTIONS = {"vcodec": "libx264", "acodec": "aac", "preset": "fast", "movflags": "+faststart"}
SILENT_AUDIO_SOURCE = "anullsrc=channel_layout=stereo:sample_rate=44100"


class VideoProcessingError(Exception):
    """Raised when an ffmpeg invocation fails."""

    def __init__(self, step: str, stderr: Optional[bytes] = None) -> None:
        detail = (stderr or b"").decode("utf-8", errors="replace").strip().splitlines()
        message = f"ffmpeg {step} failed"
        if detail:
            message = f"{message}: {detail[-1]}"
        super().__init__(message)
        self.step = step


class MediaInfo(NamedTuple):
    duration: float
    has_audio: bool


def _silence(duration: float):
    """Silent stereo track of ``duration`` seconds for clips without audio."""
    return ffmpeg.input(SILENT_AUDIO_SOURCE, f="lavfi", t=duration).audio


class FFmpegProcessor:
    """Runs export steps through the ffmpeg binary.

    Every clip handed to ``concat`` needs an audio stream, so clips recorded
    without one get a silent track while they are trimmed.
    """

    def __init__(self, cmd: str = "ffmpeg") -> None:
        self.cmd = cmd

    async def _run(self, step: str, stream) -> None:
        logger.info(f"FFmpeg {step} started: {' '.join(ffmpeg.compile(stream, cmd=self.cmd))}")
        try:
            await asyncio.to_thread(
                ffmpeg.run,
                stream,
                cmd=self.cmd,
                overwrite_output=True,
                capture_stdout=True,
                capture_stderr=True,
            )
        except ffmpeg.Error as e:
            logger.error(f"FFmpeg {step} failed: {(e.stderr or b'').decode('utf-8', errors='replace')}")
            raise VideoProcessingError(step, e.stderr) from e
        logger.info(f"FFmpeg {step} completed")

    async def media_info(self, input_path: Path) -> MediaInfo:
        """Read the duration of ``input_path`` and whether it carries audio."""
        try:
            info = await asyncio.to_thread(ffmpeg.probe, str(input_path))
        except ffmpeg.Error as e:
            raise VideoProcessingError("inspect", e.stderr) from e
        has_audio = any(s.get("codec_type") == "audio" for s in info.get("streams", []))
        return MediaInfo(float(info.get("format", {}).get("duration") or 0), has_audio)

    async def trim(
        self,
        input_path: Path,
        output_path: Path,
        start_time: float,
        end_time: float,
        size: Optional[Tuple[int, int]] = None,
    ) -> None:
        """Cut ``[start_time, end_time)`` seconds out of ``input_path``.

        With ``size`` the clip is scaled to fit and letterboxed, so clips of
        different sources can be concatenated. The output always has an audio
        stream.
        """
        info = await self.media_info(input_path)
        source = ffmpeg.input(str(input_path), ss=start_time, t=end_time - start_time)
        video = source.video
        if size is not None:
            width, height = size
            video = (
                video.filter("scale", width, height, force_original_aspect_ratio="decrease")
                .filter("pad", width, height, "(ow-iw)/2", "(oh-ih)/2")
                .filter("setsar", 1)
            )
        if info.has_audio:
            audio = source.audio
        else:
            logger.debug(f"{input_path.name} has no audio, adding a silent track")
            audio = _silence(end_time - start_time)
        stream = ffmpeg.output(video, audio, str(output_path), **_ENCODE_OPTIONS)
        await self._run("trim", stream)

    async def concat(self, input_paths: List[Path], output_path: Path) -> None:
        streams = []
        for path in input_paths:
            info = await self.media_info(path)
            source = ffmpeg.input(str(path))
            streams += [source.video, source.audio if info.has_audio else _silence(info.duration)]
        joined = ffmpeg.concat(*streams, v=1, a=1).node
        stream = ffmpeg.output(joined[0], joined[1], str(output_path), **_ENCODE_OPTIONS)
        await self._run("concat", stream)

    async def add_watermark(self, input_path: Path, output_path: Path, text: str = WATERMARK_TEXT) -> None:
        """Burn ``text`` into the bottom right corner at half opacity."""
        info = await self.media_info(input_path)
        source = ffmpeg.input(str(input_path))
        video = source.video.drawtext(
            text=text,
            fontsize=24,
            fontcolor="white@0.5",
            x="w-tw-20",
            y="h-th-20",
        )
        streams = [video, source.audio] if info.has_audio else [video]
        options = {"vcodec": "libx264", "preset": "fast", "movflags": "+faststart"}
        if info.has_audio:
            options["acodec"] = "copy"
        stream = ffmpeg.output(*streams, str(output_path), **options)
        await self._run("watermark", stream)

    async def copy(self, input_path: Path, output_path: Path) -> None:
        await asyncio.to_thread(shutil.copyfile, input_path, output_path)


def get_ffmpeg_processor() -> FFmpegProcessor:
    return FFmpegProcessor()
