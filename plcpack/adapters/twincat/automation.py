"""
TwinCAT adapter — drives the TwinCAT XAE shell through its DTE COM interface.

The DTE object lives in a single-threaded apartment. ``open()`` initializes
COM for the calling thread, creates the DTE, and tears both down on exit,
so it must be entered on the thread that will use the handle.

Requires pywin32 (Windows only). ``is_available()`` reports False
elsewhere and ``open()`` raises if called anyway.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from plcpack.adapters.base import LIBRARY_EXTENSION, AutomationAdapter, AutomationHandle

logger = logging.getLogger(__name__)

DEFAULT_PROG_ID = "TcXaeShell.DTE.15.0"


def plc_tree_path(plc_name: str) -> str:
    """System manager tree path of a PLC project node."""
    return f"TIPC^{plc_name}^{plc_name} Project"


class _TwincatHandle(AutomationHandle):
    def __init__(self, dte: Any):
        self._dte = dte

    def save_library(
        self,
        project_path: Path,
        output_directory: Path,
        solution_path: Path,
    ) -> str:
        project_path = Path(project_path)
        output_directory = Path(output_directory)
        plc_name = project_path.stem

        logger.debug("Opening solution %s", solution_path)
        self._dte.Solution.Open(str(solution_path))

        tree_item = self._lookup_plc_project(plc_name)
        if tree_item is None:
            logger.error("PLC project '%s' not found in %s", plc_name, solution_path)
            return ""

        output_directory.mkdir(parents=True, exist_ok=True)
        library = output_directory / f"{plc_name}{LIBRARY_EXTENSION}"
        tree_item.SaveAsLibrary(str(library), False)

        if not library.is_file():
            return ""
        return str(library)

    def _lookup_plc_project(self, plc_name: str) -> Any:
        import pywintypes

        projects = self._dte.Solution.Projects
        # COM collections are 1-based
        for index in range(1, projects.Count + 1):
            system_manager = projects.Item(index).Object
            try:
                return system_manager.LookupTreeItem(plc_tree_path(plc_name))
            except pywintypes.com_error:
                continue
        return None


class TwincatAutomationAdapter(AutomationAdapter):
    """TwinCAT XAE automation interface via pywin32."""

    def __init__(self, prog_id: str = DEFAULT_PROG_ID, suppress_ui: bool = True):
        self._prog_id = prog_id
        self._suppress_ui = suppress_ui

    @property
    def name(self) -> str:
        return "twincat"

    @property
    def prog_id(self) -> str:
        return self._prog_id

    def is_available(self) -> bool:
        if sys.platform != "win32":
            return False
        return importlib.util.find_spec("win32com") is not None

    @contextmanager
    def open(self) -> Iterator[AutomationHandle]:
        if not self.is_available():
            raise RuntimeError("TwinCAT automation interface requires Windows and pywin32")

        import pythoncom
        import win32com.client

        pythoncom.CoInitializeEx(pythoncom.COINIT_APARTMENTTHREADED)
        try:
            logger.debug("Creating DTE instance %s", self._prog_id)
            dte = win32com.client.Dispatch(self._prog_id)
            dte.SuppressUI = self._suppress_ui
            try:
                yield _TwincatHandle(dte)
            finally:
                try:
                    dte.Quit()
                except pythoncom.com_error as e:
                    logger.warning("Failed to quit DTE instance: %s", e)
        finally:
            pythoncom.CoUninitialize()
