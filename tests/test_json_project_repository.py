"""Tests for the JSON project store."""

import json
import os
from pathlib import Path

import pytest

from core.errors import CorruptRecord, ProjectNotFound, StorageWriteError
from core.models import Adjustments, resolve_adjustments
from core.services.ids import TimeIdGenerator, UuidIdGenerator
from infrastructure.json_project_repository import JsonProjectRepository


def test_create_persists_full_record(repo: JsonProjectRepository, storage_root: Path) -> None:
    project = repo.create("/photos/a.jpg")

    path = storage_root / f"{project.id}.json"
    assert path.exists()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {
        "id": project.id,
        "name": f"Project {project.id}",
        "sourceUri": "/photos/a.jpg",
        "createdAt": project.created_at,
        "updatedAt": project.updated_at,
    }
    assert project.created_at == project.updated_at
    assert project.adjustments is None


def test_record_is_pretty_printed(repo: JsonProjectRepository, storage_root: Path) -> None:
    project = repo.create("/photos/a.jpg")
    text = (storage_root / f"{project.id}.json").read_text(encoding="utf-8")
    assert text.startswith('{\n  "id"')


def test_ids_are_unique_within_one_millisecond(storage_root: Path) -> None:
    repo = JsonProjectRepository(storage_root, clock=lambda: 1_700_000_000_000)
    ids = {repo.create(f"/photos/{i}.jpg").id for i in range(5)}
    assert len(ids) == 5
    assert len(repo.list()) == 5


def test_create_skips_ids_already_on_disk(storage_root: Path) -> None:
    storage_root.mkdir(parents=True)
    (storage_root / "1000.json").write_text("{}", encoding="utf-8")
    repo = JsonProjectRepository(storage_root, id_generator=TimeIdGenerator(lambda: 1000))
    assert repo.create("/a.jpg").id == "1001"


def test_uuid_generator_can_replace_time_ids(storage_root: Path) -> None:
    repo = JsonProjectRepository(storage_root, id_generator=UuidIdGenerator())
    project = repo.create("/a.jpg")
    assert len(project.id) == 32
    assert repo.get(project.id) == project


def test_save_then_get_round_trips_adjustments(repo: JsonProjectRepository) -> None:
    project = repo.create("/photos/a.jpg")
    adj = Adjustments(brightness=0.25, contrast=-0.5, exposure=1.5, saturation=0.0)

    saved = repo.touch_and_save(project, adj, "/edits/edit-1.jpg")
    loaded = repo.get(project.id)

    assert loaded == saved
    assert resolve_adjustments(loaded) == adj
    assert loaded.id == project.id
    assert loaded.source_uri == project.source_uri
    assert loaded.created_at == project.created_at
    assert loaded.updated_at > project.updated_at
    assert loaded.edited_uri == "/edits/edit-1.jpg"


def test_save_replaces_the_whole_record(repo: JsonProjectRepository) -> None:
    project = repo.create("/photos/a.jpg")
    edited = repo.touch_and_save(project, Adjustments(contrast=0.3), "/edits/e.jpg")

    # Omitted optional fields are dropped, not merged
    edited.edited_uri = None
    edited.adjustments = None
    repo.save(edited)

    loaded = repo.get(project.id)
    assert loaded.edited_uri is None
    assert loaded.adjustments is None


def test_save_leaves_no_temporary_files(repo: JsonProjectRepository, storage_root: Path) -> None:
    project = repo.create("/photos/a.jpg")
    for i in range(3):
        project = repo.touch_and_save(project, Adjustments(brightness=i / 10), None)
    assert sorted(p.name for p in storage_root.iterdir()) == [f"{project.id}.json"]


def test_get_missing_returns_none(repo: JsonProjectRepository) -> None:
    assert repo.get("does-not-exist") is None


def test_get_corrupt_record_raises(repo: JsonProjectRepository, storage_root: Path) -> None:
    storage_root.mkdir(parents=True)
    (storage_root / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(CorruptRecord) as exc:
        repo.get("broken")
    assert exc.value.path.endswith("broken.json")


def test_get_rejects_path_like_ids(repo: JsonProjectRepository) -> None:
    with pytest.raises(ValueError):
        repo.get("../outside")


def test_delete_then_get_is_not_found(repo: JsonProjectRepository) -> None:
    project = repo.create("/photos/a.jpg")
    repo.delete(project.id)
    assert repo.get(project.id) is None


def test_delete_missing_raises_not_found(repo: JsonProjectRepository) -> None:
    with pytest.raises(ProjectNotFound):
        repo.delete("nope")


def test_list_creates_directory_lazily(repo: JsonProjectRepository, storage_root: Path) -> None:
    assert not storage_root.exists()
    assert repo.list() == []
    assert storage_root.is_dir()
    # Listing again is side-effect free
    assert repo.list() == []


def test_list_skips_corrupt_records(
    repo: JsonProjectRepository, storage_root: Path, log_messages: list[str]
) -> None:
    a = repo.create("/photos/a.jpg")
    b = repo.create("/photos/b.jpg")
    (storage_root / "bad.json").write_text("][", encoding="utf-8")
    (storage_root / "incomplete.json").write_text('{"id": "x"}', encoding="utf-8")
    (storage_root / "notes.txt").write_text("ignored", encoding="utf-8")

    projects = repo.list()

    assert {p.id for p in projects} == {a.id, b.id}
    assert any("bad.json" in m for m in log_messages)
    assert any("incomplete.json" in m for m in log_messages)


def test_list_skips_records_with_unusable_timestamps(
    repo: JsonProjectRepository, storage_root: Path
) -> None:
    a = repo.create("/photos/a.jpg")
    b = repo.create("/photos/b.jpg")
    template = '{{"id": "{id}", "sourceUri": "/x.jpg", "createdAt": {ts}, "updatedAt": 1}}'
    for record_id, ts in [("nan", "NaN"), ("huge", "1e400"), ("half", "1.5")]:
        (storage_root / f"{record_id}.json").write_text(
            template.format(id=record_id, ts=ts), encoding="utf-8"
        )

    assert {p.id for p in repo.list()} == {a.id, b.id}


def test_record_id_must_match_file_name(repo: JsonProjectRepository, storage_root: Path) -> None:
    a = repo.create("/photos/a.jpg")
    record = json.loads(repo.path_for(a.id).read_text(encoding="utf-8"))
    record["id"] = "other"
    (storage_root / "stray.json").write_text(json.dumps(record), encoding="utf-8")

    assert [p.id for p in repo.list()] == [a.id]
    with pytest.raises(CorruptRecord):
        repo.get("stray")
    assert repo.get("other") is None


def test_list_skips_non_utf8_records(repo: JsonProjectRepository, storage_root: Path) -> None:
    a = repo.create("/photos/a.jpg")
    (storage_root / "binary.json").write_bytes(b"\xff\xfe\x00garbage")
    assert [p.id for p in repo.list()] == [a.id]


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
def test_create_in_read_only_root_raises_write_error(tmp_path: Path) -> None:
    root = tmp_path / "ro"
    root.mkdir()
    root.chmod(0o500)
    try:
        with pytest.raises(StorageWriteError):
            JsonProjectRepository(root).create("/photos/a.jpg")
    finally:
        root.chmod(0o700)
