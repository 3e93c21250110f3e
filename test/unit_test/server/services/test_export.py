"""Unit tests for export rendering.

``process_export_job`` runs against the in-memory database with a mocked
ffmpeg processor; progress is observed through ``ExportRepository.apply``.
"""

from pathlib import Path

import pytest
import pytest_asyncio

from vibe_creator.core.database.entities import ExportHistory
from vibe_creator.core.database.repositories import ExportRepository
from vibe_creator.core.models.domain.enums import ExportResolution, ExportStatus
from vibe_creator.server.services.export import _percent, process_export_job


@pytest.fixture
def clips(storage):
    paths = []
    for index in range(3):
        path = storage.temp_dir / f"clip{index}.mp4"
        path.write_bytes(b"source")
        paths.append(path)
    return paths


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("renderer@vibecreator.id")


async def _job(session, owner, clips, **fields) -> ExportHistory:
    timeline = {
        "clips": [{"localPath": str(path), "startTime": 0, "endTime": 2} for path in clips],
        "settings": {"width": 1920, "height": 1080, "fps": 30},
    }
    job = ExportHistory(user_id=owner.id, timeline_data=timeline, **fields)
    session.add(job)
    await session.commit()
    return job


async def _load(session_factory, job_id) -> ExportHistory:
    async with session_factory() as fresh:
        return await fresh.get(ExportHistory, job_id)


@pytest.fixture
def progress(monkeypatch):
    seen = []
    original = ExportRepository.apply

    async def spy(self, job, **changes):
        seen.append(changes.get("progress"))
        return await original(self, job, **changes)

    monkeypatch.setattr(ExportRepository, "apply", spy)
    return seen


@pytest.mark.asyncio
async def test_multi_clip_render(session, session_factory, owner, clips, storage, processor, progress):
    job = await _job(session, owner, clips, resolution=ExportResolution.SD, watermark=False)

    await process_export_job(job.id, session_factory=session_factory, processor=processor, storage=storage)

    done = await _load(session_factory, job.id)
    assert done.status == ExportStatus.COMPLETED
    assert done.progress == 100
    assert done.attempts == 1
    assert done.started_at is not None
    assert done.completed_at is not None
    assert done.local_path == str(storage.export_path(job.id))
    assert Path(done.local_path).read_bytes() == b"rendered"
    assert progress == [None, 17, 33, 50, 75, 90, 100]

    assert processor.trim.await_count == 3
    assert processor.trim.await_args_list[0].args[4] == (854, 480)
    trimmed, merged = processor.concat.await_args.args
    assert [p.name for p in trimmed] == ["trimmed_0.mp4", "trimmed_1.mp4", "trimmed_2.mp4"]
    processor.copy.assert_awaited_once_with(merged, storage.export_path(job.id))
    assert not storage.job_work_dir(job.id).exists()


@pytest.mark.asyncio
async def test_single_clip_skips_concat(session, session_factory, owner, clips, storage, processor, progress):
    job = await _job(session, owner, clips[:1], watermark=True)

    await process_export_job(job.id, session_factory=session_factory, processor=processor, storage=storage)

    processor.concat.assert_not_awaited()
    source, final = processor.add_watermark.await_args.args
    assert source.name == "trimmed_0.mp4"
    assert final == storage.export_path(job.id)
    assert progress == [None, 50, 90, 100]


@pytest.mark.asyncio
async def test_failure_marks_job_failed(session, session_factory, owner, clips, storage, processor):
    processor.concat.side_effect = RuntimeError("ffmpeg concat failed: Invalid data")
    job = await _job(session, owner, clips)

    await process_export_job(job.id, session_factory=session_factory, processor=processor, storage=storage)

    failed = await _load(session_factory, job.id)
    assert failed.status == ExportStatus.FAILED
    assert failed.error_message == "ffmpeg concat failed: Invalid data"
    assert failed.progress == 50
    assert not storage.job_work_dir(job.id).exists()


@pytest.mark.asyncio
async def test_missing_timeline_fails(session, session_factory, owner, storage, processor):
    job = ExportHistory(user_id=owner.id)
    session.add(job)
    await session.commit()

    await process_export_job(job.id, session_factory=session_factory, processor=processor, storage=storage)

    failed = await _load(session_factory, job.id)
    assert failed.status == ExportStatus.FAILED
    assert failed.error_message == "Job is missing timeline data"


@pytest.mark.asyncio
async def test_clip_moved_outside_storage_fails(session, session_factory, owner, storage, processor, tmp_path):
    outside = tmp_path / "elsewhere.mp4"
    outside.write_bytes(b"x")
    job = await _job(session, owner, [outside])

    await process_export_job(job.id, session_factory=session_factory, processor=processor, storage=storage)

    failed = await _load(session_factory, job.id)
    assert failed.status == ExportStatus.FAILED
    assert failed.error_message == "File path is outside the upload directory"
    processor.trim.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_job_is_ignored(session_factory, storage, processor):
    await process_export_job("missing", session_factory=session_factory, processor=processor, storage=storage)

    processor.trim.assert_not_awaited()


@pytest.mark.parametrize(
    "done,total,scale,expected",
    [(1, 3, 50, 17), (2, 3, 50, 33), (3, 3, 50, 50), (1, 4, 50, 13), (1, 8, 50, 6), (1, 1, 50, 50)],
)
def test_percent_rounds_half_up(done, total, scale, expected):
    assert _percent(done, total, scale) == expected
