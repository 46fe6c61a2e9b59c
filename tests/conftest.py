"""
Shared test fixtures — a minimal TwinCAT solution tree on disk.

Layout built by ``twincat_tree``:

    Machine.sln                    → references Machine\\Machine.tsproj
    Machine/Machine.tsproj         → references Plc1\\Plc1.plcproj
    Machine/Plc1/Plc1.plcproj
"""

import logging
import textwrap
from pathlib import Path
from types import SimpleNamespace

import pytest

from plcpack.adapters.mock import MockAutomationAdapter
from plcpack.adapters.registry import AdapterRegistry

_UNSET = object()


def write_plcproj(
    path: Path,
    title=_UNSET,
    author=_UNSET,
    version=_UNSET,
    description=_UNSET,
) -> Path:
    """Write a .plcproj with the given PropertyGroup fields (None = omitted)."""
    fields = {
        "Title": "Lib1" if title is _UNSET else title,
        "Author": "A" if author is _UNSET else author,
        "ProjectVersion": "1.2.3" if version is _UNSET else version,
        "Description": "d" if description is _UNSET else description,
    }
    props = "\n".join(
        f"    <{tag}>{value}</{tag}>" for tag, value in fields.items() if value is not None
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<Project DefaultTargets="Build" '
        'xmlns="http://schemas.microsoft.com/developer/msbuild/2003">\n'
        "  <PropertyGroup>\n"
        "    <FileVersion>1.0.0.0</FileVersion>\n"
        f"    <Name>{path.stem}</Name>\n"
        f"{props}\n"
        "  </PropertyGroup>\n"
        "</Project>\n",
        encoding="utf-8",
    )
    return path


def write_solution(path: Path, *project_paths: str) -> Path:
    """Write a .sln referencing the given (backslash) project paths."""
    entries = "".join(
        f'Project("{{B1E792BE-AA5F-4E3C-8C82-674BF9C0715B}}") = "P{i}", "{rel}", '
        f'"{{5B2A4F43-0E5D-4E4B-9E27-3B0D1A6B8F1{i}}}"\nEndProject\n'
        for i, rel in enumerate(project_paths)
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "\ufeff\nMicrosoft Visual Studio Solution File, Format Version 12.00\n"
        "# Visual Studio Version 17\n"
        f"{entries}"
        "Global\nEndGlobal\n",
        encoding="utf-8",
    )
    return path


def write_tsproj(path: Path, plc_relative: str) -> Path:
    """Write a TwinCAT system project nesting a PLC project."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        textwrap.dedent(f"""\
            <?xml version="1.0"?>
            <TcSmProject TcSmVersion="1.0">
              <Project>
                <Plc>
                  <Project Name="Plc1" PrjFilePath="{plc_relative}" />
                </Plc>
              </Project>
            </TcSmProject>
        """),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def twincat_tree(tmp_path: Path) -> Path:
    """Create a solution tree and return the .plcproj path."""
    project = write_plcproj(tmp_path / "Machine" / "Plc1" / "Plc1.plcproj")
    write_tsproj(tmp_path / "Machine" / "Machine.tsproj", r"Plc1\Plc1.plcproj")
    write_solution(tmp_path / "Machine.sln", r"Machine\Machine.tsproj")
    return project


@pytest.fixture
def mock_adapter() -> MockAutomationAdapter:
    return MockAutomationAdapter()


@pytest.fixture
def mock_registry(mock_adapter: MockAutomationAdapter) -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.register(mock_adapter)
    return registry


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """CLI tests reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def files() -> SimpleNamespace:
    """Writers for project, solution and TwinCAT project files."""
    return SimpleNamespace(plcproj=write_plcproj, solution=write_solution, tsproj=write_tsproj)
