from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from core.errors import PhotoEditorError


class _RenderTask(QRunnable):
    """QRunnable for background rendering.

    Emits `receiver.frameRendered(token, frame)` upon success or
    `receiver.renderFailed(token, message)` on failure. The receiver is
    expected to own both Qt signals.
    """

    def __init__(
        self, *, editor_vm: Any, size: tuple[int, int], receiver: QObject, token: int
    ) -> None:
        super().__init__()
        self._vm = editor_vm
        self._size = size
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            frame = self._vm.render(self._size)
        except PhotoEditorError as ex:
            logger.error("Render task failed: {}", ex.message)
            self._receiver.renderFailed.emit(self._token, ex.message)  # type: ignore[attr-defined]
            return
        except (OSError, ValueError) as ex:  # pragma: no cover - GUI background task
            logger.exception("Render task crashed: {}", ex)
            self._receiver.renderFailed.emit(self._token, str(ex))  # type: ignore[attr-defined]
            return
        self._receiver.frameRendered.emit(self._token, frame)  # type: ignore[attr-defined]


class RenderTaskRunner:
    """Dispatches render tasks to a single-thread pool.

    Renders run one at a time since the renderer keeps the current frame.
    Every request gets an increasing token; receivers drop results whose token
    is older than `latest_token`.
    """

    def __init__(self, *, editor_vm: Any, receiver: QObject) -> None:
        self._vm = editor_vm
        self._receiver = receiver
        self._pool = QThreadPool()
        self._pool.setMaxThreadCount(1)
        self._token = 0

    @property
    def latest_token(self) -> int:
        return self._token

    def request_render(self, size: tuple[int, int]) -> int:
        """Queue a render at `size`. Returns the token of the request."""
        self._token += 1
        # Superseded requests that have not started yet are dropped
        self._pool.clear()
        task = _RenderTask(
            editor_vm=self._vm, size=size, receiver=self._receiver, token=self._token
        )
        self._pool.start(task)
        return self._token

    def wait(self) -> None:
        """Block until queued renders are finished."""
        self._pool.waitForDone()
