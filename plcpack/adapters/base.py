"""
Adapter base — the contract between the automation session and the IDE.

The automation interface (TwinCAT XAE over COM) has single-threaded
affinity: a handle is only valid on the thread that opened it. Adapters
therefore hand out handles through a context manager, and the session
opens, uses and releases the handle on one dedicated thread.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path

LIBRARY_EXTENSION = ".library"


class AutomationHandle(ABC):
    """An open connection to the automation interface.

    Only valid inside the ``with adapter.open()`` block that produced it,
    and only on the thread that entered that block.
    """

    @abstractmethod
    def save_library(
        self,
        project_path: Path,
        output_directory: Path,
        solution_path: Path,
    ) -> str:
        """Export the compiled library of a PLC project.

        Args:
            project_path: The ``.plcproj`` file to export.
            output_directory: Directory the library file is written into.
            solution_path: The ``.sln`` that contains the project.

        Returns:
            Path of the written library file, or an empty string when
            the interface produced nothing.
        """


class AutomationAdapter(ABC):
    """Abstract base class for automation interface adapters.

    To create a new adapter:
        1. Subclass AutomationAdapter
        2. Implement name, is_available, open
        3. Register it in the AdapterRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'twincat', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying automation interface can be used here.

        Should be fast and never raise.
        """

    @abstractmethod
    def open(self) -> AbstractContextManager[AutomationHandle]:
        """Acquire a handle to the automation interface.

        The handle is released when the context exits, whether the
        block succeeded or raised.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
