"""
Automation session — export a PLC library on a dedicated thread.

The automation interface has single-threaded affinity, so every call to
it happens on one thread created for the session and joined before
``export_library`` returns. Nothing else touches the adapter handle.

When no solution is supplied, resolution is started on a background
executor *before* the session thread is created, and the session thread
waits for it right before the first automation call. The exported path
comes back through a future instead of shared state.

Failures never escape the session thread: they are logged and turned
into an empty result.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from plcpack.adapters.base import AutomationAdapter
from plcpack.core.services import messages
from plcpack.core.services.errors import safe_execute
from plcpack.core.services.solution_resolver import submit_parent_solution

SESSION_THREAD_NAME = "automation-session"


class AutomationSession:
    """Scoped access to the automation interface for one export."""

    def __init__(self, adapter: AutomationAdapter, logger: logging.Logger | None = None):
        self._adapter = adapter
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def export_library(
        self,
        project_path: str | Path,
        output_directory: str | Path,
        solution: str | Path = "",
    ) -> str:
        """Export the compiled library of a PLC project.

        Args:
            project_path: The ``.plcproj`` file.
            output_directory: Where the library file is written.
            solution: The ``.sln`` containing the project, or empty to
                discover it.

        Returns:
            Path of the exported library, or an empty string on failure.
        """
        project_path = Path(project_path)
        output_directory = Path(output_directory)
        result: Future[str] = Future()

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="solution-resolver") as executor:
            pending = None if solution else submit_parent_solution(project_path, executor)

            worker = threading.Thread(
                target=self._run,
                args=(project_path, output_directory, str(solution), pending, result),
                name=SESSION_THREAD_NAME,
            )
            worker.start()
            worker.join()

        return result.result()

    # ── Session thread ──────────────────────────────────────────

    def _run(
        self,
        project_path: Path,
        output_directory: Path,
        solution: str,
        pending: Future[Path] | None,
        result: Future[str],
    ) -> None:
        try:
            library = self._export(project_path, output_directory, solution, pending)
        except Exception as e:
            # last line of defense; nothing may leave this thread
            self._logger.error("%s", e)
            library = ""
        result.set_result(library)

    def _export(
        self,
        project_path: Path,
        output_directory: Path,
        solution: str,
        pending: Future[Path] | None,
    ) -> str:
        if not solution and pending is not None:
            resolved = safe_execute(pending.result, self._logger)
            solution = str(resolved) if resolved else ""

        if not solution:
            self._logger.error(messages.FAILED_TO_RESOLVE_SOLUTION, project_path)
            return ""

        self._logger.info(messages.SAVING_LIBRARY, project_path)
        library = safe_execute(
            self._save_library,
            self._logger,
            project_path,
            output_directory,
            Path(solution),
        )
        if library:
            self._logger.info(messages.LIBRARY_SAVED, library)
        return library or ""

    def _save_library(self, project_path: Path, output_directory: Path, solution: Path) -> str:
        with self._adapter.open() as handle:
            return handle.save_library(project_path, output_directory, solution)
