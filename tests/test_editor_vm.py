"""Tests for the editor view-model."""

from pathlib import Path

from PIL import Image
import pytest

from app.viewmodels.editor_vm import EditorVM, NoProjectLoaded
from core.color_matrix import IDENTITY, color_matrix, reduced_color_matrix
from core.errors import RenderNotReady, StorageWriteError
from core.models import Adjustments
from infrastructure.json_project_repository import JsonProjectRepository
from infrastructure.media_store import MediaStore
from infrastructure.renderer import PillowRenderer


@pytest.fixture
def editor(repo: JsonProjectRepository, fake_renderer, media: MediaStore) -> EditorVM:
    return EditorVM(repo, fake_renderer, media)


def test_load_missing_project_returns_false(editor: EditorVM) -> None:
    assert editor.load("gone") is False
    assert editor.project is None


def test_load_applies_defaults_for_missing_adjustments(
    editor: EditorVM, repo: JsonProjectRepository
) -> None:
    project = repo.create("/photos/a.jpg")
    assert editor.load(project.id) is True
    assert editor.adjustments == Adjustments()
    assert editor.matrix == list(IDENTITY)
    assert not editor.is_dirty


def test_load_resolves_partial_adjustments(editor: EditorVM, repo: JsonProjectRepository) -> None:
    project = repo.create("/photos/a.jpg")
    project.adjustments = {"exposure": 0.5}
    repo.save(project)

    editor.load(project.id)

    assert editor.adjustments == Adjustments(exposure=0.5)


def test_set_adjustment_clamps_and_updates_matrix(
    editor: EditorVM, repo: JsonProjectRepository
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)

    editor.set_adjustment("contrast", 1)
    editor.set_adjustment("saturation", 9)

    assert editor.adjustments == Adjustments(contrast=1, saturation=2)
    assert editor.matrix == color_matrix(0, 1, 0, 2)
    assert editor.is_dirty


def test_unknown_adjustment_is_rejected(editor: EditorVM) -> None:
    with pytest.raises(ValueError):
        editor.set_adjustment("hue", 0.3)


def test_render_passes_source_matrix_and_size(
    editor: EditorVM, repo: JsonProjectRepository, fake_renderer
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.set_adjustment("brightness", 0.5)

    editor.render((300, 200))

    assert fake_renderer.frames == [("/photos/a.jpg", color_matrix(0.5, 0, 0, 1), (300, 200))]


def test_save_before_render_is_not_ready(editor: EditorVM, repo: JsonProjectRepository) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    with pytest.raises(RenderNotReady):
        editor.save()


def test_save_without_project_fails(editor: EditorVM) -> None:
    with pytest.raises(NoProjectLoaded):
        editor.save()


def test_save_writes_edit_and_updates_record(
    editor: EditorVM, repo: JsonProjectRepository, fake_renderer
) -> None:
    project = repo.create("/photos/a.jpg")
    editor.load(project.id)
    editor.set_adjustment("exposure", -1)
    editor.render((100, 100))

    result = editor.save()

    stored = repo.get(project.id)
    assert stored == result.project
    assert Path(result.edited_uri).read_bytes() == fake_renderer.payload
    assert stored.edited_uri == result.edited_uri
    assert stored.adjustments == Adjustments(exposure=-1).to_dict()
    assert stored.created_at == project.created_at
    assert stored.source_uri == project.source_uri
    assert stored.updated_at > project.updated_at
    assert not editor.is_dirty


def test_second_save_removes_superseded_edit(
    editor: EditorVM, repo: JsonProjectRepository
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.render()
    first = editor.save().edited_uri
    editor.set_adjustment("brightness", 0.1)
    second = editor.save().edited_uri

    assert first != second
    assert not Path(first).exists()
    assert Path(second).exists()


def test_failed_record_write_discards_new_edit(
    editor: EditorVM, repo: JsonProjectRepository, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.render()

    def fail(*_args, **_kwargs):
        raise StorageWriteError("disk full")

    monkeypatch.setattr(repo, "touch_and_save", fail)
    with pytest.raises(StorageWriteError):
        editor.save()
    assert list((tmp_path / "edits").iterdir()) == []


def test_export_writes_to_exports(
    editor: EditorVM, repo: JsonProjectRepository, tmp_path: Path
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.render()

    result = editor.export()

    assert Path(result.path).parent == tmp_path / "exports"
    assert result.size_bytes == Path(result.path).stat().st_size


def test_reset_restores_neutral_values(editor: EditorVM, repo: JsonProjectRepository) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.set_adjustment("brightness", 0.7)
    assert editor.reset() == Adjustments()


def test_reduced_variant_ignores_saturation(
    repo: JsonProjectRepository, fake_renderer, media: MediaStore
) -> None:
    editor = EditorVM(repo, fake_renderer, media, variant="reduced")
    editor.load(repo.create("/photos/a.jpg").id)
    editor.set_adjustment("saturation", 0)
    editor.set_adjustment("exposure", 2)

    assert editor.adjustments.saturation == 1
    assert editor.adjustments.exposure == 1
    assert editor.matrix == reduced_color_matrix(0, 0, 1)


def test_end_to_end_with_pillow(
    repo: JsonProjectRepository, media: MediaStore, sample_image: Path
) -> None:
    editor = EditorVM(repo, PillowRenderer(), media)
    project = repo.create(str(sample_image))
    editor.load(project.id)
    editor.set_adjustment("saturation", 0)
    editor.render((4, 2))

    result = editor.save()

    assert Path(result.edited_uri).stat().st_size > 0
    assert repo.get(project.id).adjustments["saturation"] == 0


def test_save_after_slider_move_renders_current_adjustments(
    editor: EditorVM, repo: JsonProjectRepository, fake_renderer
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.render((300, 200))
    editor.set_adjustment("contrast", 0.5)

    editor.save()

    assert fake_renderer.frames[-1] == ("/photos/a.jpg", color_matrix(0, 0.5, 0, 1), (300, 200))


def test_save_with_current_frame_does_not_rerender(
    editor: EditorVM, repo: JsonProjectRepository, fake_renderer
) -> None:
    editor.load(repo.create("/photos/a.jpg").id)
    editor.set_adjustment("contrast", 0.5)
    editor.render()

    editor.save()
    editor.export()

    assert len(fake_renderer.frames) == 1


def test_saved_edit_matches_saved_adjustments(
    repo: JsonProjectRepository, media: MediaStore, tmp_path: Path
) -> None:
    source = tmp_path / "gray.png"
    Image.new("RGB", (4, 4), (100, 100, 100)).save(source)
    editor = EditorVM(repo, PillowRenderer(), media)
    editor.load(repo.create(str(source)).id)
    editor.render()
    editor.set_adjustment("contrast", 1.0)

    result = editor.save()

    assert result.project.adjustments["contrast"] == 1.0
    with Image.open(result.edited_uri) as saved:
        pixel = saved.convert("RGB").getpixel((1, 1))
    assert all(abs(channel - 200) <= 3 for channel in pixel)
