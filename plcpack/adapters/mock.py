"""
Mock adapter — test double for the automation interface.

Used in mock mode to simulate library exports without an installed
TwinCAT XAE. Writes a small deterministic file in place of the
compiled library and records every call.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from plcpack.adapters.base import LIBRARY_EXTENSION, AutomationAdapter, AutomationHandle


@dataclass
class SaveLibraryCall:
    """One recorded ``save_library`` invocation."""

    project_path: Path
    output_directory: Path
    solution_path: Path
    thread_name: str


class _MockHandle(AutomationHandle):
    def __init__(self, adapter: MockAutomationAdapter):
        self._adapter = adapter

    def save_library(
        self,
        project_path: Path,
        output_directory: Path,
        solution_path: Path,
    ) -> str:
        adapter = self._adapter
        adapter.call_log.append(
            SaveLibraryCall(
                project_path=Path(project_path),
                output_directory=Path(output_directory),
                solution_path=Path(solution_path),
                thread_name=threading.current_thread().name,
            )
        )

        if adapter.error is not None:
            raise RuntimeError(adapter.error)
        if not adapter.produce_library:
            return ""

        output_directory = Path(output_directory)
        output_directory.mkdir(parents=True, exist_ok=True)
        library = output_directory / f"{Path(project_path).stem}{LIBRARY_EXTENSION}"
        library.write_bytes(adapter.library_content)
        return str(library)


class MockAutomationAdapter(AutomationAdapter):
    """Mock automation adapter.

    By default every export succeeds. Use ``set_failure`` to make
    ``save_library`` raise, or ``set_empty`` to make it return nothing.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        library_content: bytes = b"[mock] compiled library",
    ):
        self._name = adapter_name
        self._available = available
        self.library_content = library_content
        self.error: str | None = None
        self.produce_library = True
        self.call_log: list[SaveLibraryCall] = []
        self.open_count = 0
        self.release_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        """Number of times save_library has been called."""
        return len(self.call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, error: str = "Mock failure") -> None:
        """Make save_library raise with the given message."""
        self.error = error

    def set_empty(self) -> None:
        """Make save_library return an empty path."""
        self.produce_library = False

    @contextmanager
    def open(self) -> Iterator[AutomationHandle]:
        self.open_count += 1
        try:
            yield _MockHandle(self)
        finally:
            self.release_count += 1

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self.call_log.clear()
        self.error = None
        self.produce_library = True
        self.open_count = 0
        self.release_count = 0
