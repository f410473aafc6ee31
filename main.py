from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.editor_vm import EditorVM
from app.viewmodels.project_list_vm import ProjectListVM
from app.views.main_window import MainWindow
from infrastructure.capture_service import CaptureService
from infrastructure.delete_service import DeleteService
from infrastructure.json_project_repository import JsonProjectRepository
from infrastructure.logging import init_logging
from infrastructure.media_store import MediaStore
from infrastructure.renderer import PillowRenderer
from infrastructure.settings import AppConfig, JsonSettings

BASE_DIR = Path(__file__).parent


def _parse_sort(settings: JsonSettings) -> list[tuple[str, bool]]:
    # Expect a list like: [{"field":"updated_at","asc":false}, ...]
    raw = settings.get("sorting.defaults", [])
    result: list[tuple[str, bool]] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and "field" in item:
                result.append((str(item.get("field")), bool(item.get("asc", True))))
    return result


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    config = AppConfig.from_settings(settings)
    init_logging(config.log_dir)
    logger.info("Starting with projects at {}", config.storage_root)

    app = QApplication(sys.argv)

    repo = JsonProjectRepository(config.storage_root)
    renderer = PillowRenderer(cache_size=config.render_cache_size, max_side=config.preview_max_side)
    if not renderer.heif_available:
        logger.info("pillow-heif not available; HEIC sources cannot be opened")
    media = MediaStore(config.edits_dir, config.exports_dir)
    capture = CaptureService(config.captures_dir)

    delete_service = DeleteService(repo, config.edits_dir)
    vm = ProjectListVM(
        repo, capture, delete_service=delete_service, sort_keys=_parse_sort(settings)
    )

    def editor_factory() -> EditorVM:
        return EditorVM(
            repo,
            renderer,
            media,
            variant=config.matrix_variant,
            jpeg_quality=config.jpeg_quality,
        )

    win = MainWindow(vm=vm, editor_factory=editor_factory)
    win.refresh()
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
