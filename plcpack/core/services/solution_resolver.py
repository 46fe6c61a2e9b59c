"""
Solution resolver — find the ``.sln`` that a PLC project belongs to.

Search order (deterministic for a fixed tree):
    1. Start in the directory holding the project file.
    2. Inspect every ``*.sln`` there, in sorted file-name order.
    3. Move one directory up and repeat, up to the filesystem root.

The first solution that references the project wins. A solution
references the project when one of its ``Project(...)`` entries points
either at the ``.plcproj`` itself or at a TwinCAT system project
(``.tsproj``/``.tspproj``) with an attribute (``PrjFilePath``) whose
relative path resolves to that same ``.plcproj``.

Nothing here writes to disk.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from concurrent.futures import Executor, Future
from pathlib import Path

from plcpack.core.models.package import PLC_PROJECT_EXTENSION
from plcpack.core.services import messages
from plcpack.core.services.errors import SolutionNotFoundError

logger = logging.getLogger(__name__)

SOLUTION_EXTENSION = ".sln"
TWINCAT_PROJECT_EXTENSIONS = (".tsproj", ".tspproj")

# Project("{type-guid}") = "Name", "relative\path\to.proj", "{project-guid}"
_PROJECT_LINE_RE = re.compile(
    r'^Project\("\{[^}]*\}"\)\s*=\s*"(?P<name>[^"]*)"\s*,\s*"(?P<path>[^"]*)"',
    re.MULTILINE,
)

_MAX_DEPTH = 20  # safety limit


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig", errors="replace")


def _normalize(path: str | Path) -> str:
    return str(path).replace("\\", "/").casefold()


def _same_file(a: Path, b: Path) -> bool:
    return _normalize(a.resolve()) == _normalize(b.resolve())


def solution_project_paths(solution_path: Path) -> list[Path]:
    """Absolute paths of every project referenced by a solution file."""
    solution_path = Path(solution_path)
    base = solution_path.parent
    paths = []
    for match in _PROJECT_LINE_RE.finditer(_read_text(solution_path)):
        relative = match.group("path").replace("\\", "/")
        paths.append(base / relative)
    return paths


def twincat_project_paths(twincat_project: Path) -> list[Path]:
    """Absolute paths of the PLC projects nested in a TwinCAT system project."""
    twincat_project = Path(twincat_project)
    root = ET.fromstring(_read_text(twincat_project))
    base = twincat_project.parent
    paths = []
    for element in root.iter():
        for value in element.attrib.values():
            if value.lower().endswith(PLC_PROJECT_EXTENSION):
                paths.append(base / value.replace("\\", "/"))
    return paths


def _twincat_project_references(twincat_project: Path, project_path: Path) -> bool:
    if not twincat_project.is_file():
        return False
    try:
        nested = twincat_project_paths(twincat_project)
    except ET.ParseError as e:
        logger.debug("Cannot parse TwinCAT project %s: %s", twincat_project, e)
        return False
    return any(_same_file(candidate, project_path) for candidate in nested)


def solution_references_project(solution_path: Path, project_path: Path) -> bool:
    """Whether a solution file (directly or through a TwinCAT project) references a PLC project."""
    project_path = Path(project_path)
    try:
        referenced = solution_project_paths(solution_path)
    except OSError as e:
        logger.debug("Cannot read solution %s: %s", solution_path, e)
        return False

    for candidate in referenced:
        if _same_file(candidate, project_path):
            return True
        if candidate.suffix.lower() in TWINCAT_PROJECT_EXTENSIONS:
            try:
                if _twincat_project_references(candidate, project_path):
                    return True
            except OSError as e:
                logger.debug("Cannot read TwinCAT project %s: %s", candidate, e)
    return False


def find_parent_solution(project_path: Path) -> Path:
    """Locate the nearest ancestor solution file that references a project.

    Args:
        project_path: The ``.plcproj`` file.

    Returns:
        Absolute path of the solution file.

    Raises:
        SolutionNotFoundError: If no solution references the project.
    """
    project_path = Path(project_path).resolve()
    current = project_path.parent

    for _ in range(_MAX_DEPTH):
        for solution in sorted(current.glob(f"*{SOLUTION_EXTENSION}")):
            if solution.is_file() and solution_references_project(solution, project_path):
                logger.debug("Resolved solution %s for %s", solution, project_path)
                return solution
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    raise SolutionNotFoundError(messages.SOLUTION_NOT_FOUND, project_path)


def submit_parent_solution(project_path: Path, executor: Executor) -> Future[Path]:
    """Start resolving the parent solution in the background.

    The returned future raises ``SolutionNotFoundError`` from
    ``result()`` when nothing matches.
    """
    return executor.submit(find_parent_solution, project_path)
