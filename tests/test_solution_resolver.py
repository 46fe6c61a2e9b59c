"""
Tests for locating the parent solution of a PLC project.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from plcpack.core.services.errors import SolutionNotFoundError
from plcpack.core.services.solution_resolver import (
    find_parent_solution,
    solution_project_paths,
    solution_references_project,
    submit_parent_solution,
    twincat_project_paths,
)


class TestSolutionProjectPaths:
    def test_parses_project_entries(self, tmp_path: Path, files):
        sln = files.solution(tmp_path / "M.sln", r"A\A.tsproj", r"B\Sub\B.plcproj")
        assert solution_project_paths(sln) == [
            tmp_path / "A" / "A.tsproj",
            tmp_path / "B" / "Sub" / "B.plcproj",
        ]

    def test_empty_solution(self, tmp_path: Path, files):
        assert solution_project_paths(files.solution(tmp_path / "E.sln")) == []


class TestSolutionReferencesProject:
    def test_direct_reference(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "Plc1" / "Plc1.plcproj")
        sln = files.solution(tmp_path / "M.sln", r"Plc1\Plc1.plcproj")
        assert solution_references_project(sln, project)

    def test_direct_reference_ignores_case(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "Plc1" / "Plc1.plcproj")
        sln = files.solution(tmp_path / "M.sln", r"PLC1\plc1.PLCPROJ")
        assert solution_references_project(sln, project)

    def test_reference_through_tsproj(self, twincat_tree: Path):
        sln = twincat_tree.parents[2] / "Machine.sln"
        assert solution_references_project(sln, twincat_tree)

    def test_tsproj_naming_other_plc(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "M" / "Plc1" / "Plc1.plcproj")
        files.tsproj(tmp_path / "M" / "M.tsproj", r"Plc2\Plc2.plcproj")
        sln = files.solution(tmp_path / "M.sln", r"M\M.tsproj")
        assert not solution_references_project(sln, project)

    def test_missing_referenced_tsproj(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "Plc1" / "Plc1.plcproj")
        sln = files.solution(tmp_path / "M.sln", r"Gone\Gone.tsproj")
        assert not solution_references_project(sln, project)

    def test_tsproj_naming_sibling_with_same_suffix(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "Machine" / "Plc1" / "Plc1.plcproj")
        files.plcproj(tmp_path / "Machine" / "OldPlc1" / "Plc1.plcproj")
        files.tsproj(tmp_path / "Machine" / "Machine.tsproj", r"OldPlc1\Plc1.plcproj")
        sln = files.solution(tmp_path / "Machine.sln", r"Machine\Machine.tsproj")

        assert not solution_references_project(sln, project)
        with pytest.raises(SolutionNotFoundError):
            find_parent_solution(project)

    def test_tsproj_reference_ignores_case(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "M" / "Plc1" / "Plc1.plcproj")
        files.tsproj(tmp_path / "M" / "M.tsproj", r"PLC1\plc1.PLCPROJ")
        sln = files.solution(tmp_path / "M.sln", r"M\M.tsproj")
        assert solution_references_project(sln, project)

    def test_malformed_tsproj(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "M" / "Plc1" / "Plc1.plcproj")
        (tmp_path / "M" / "M.tsproj").write_text(r"<TcSmProject> Plc1\Plc1.plcproj")
        sln = files.solution(tmp_path / "M.sln", r"M\M.tsproj")
        assert not solution_references_project(sln, project)


class TestTwincatProjectPaths:
    def test_nested_plc_projects(self, tmp_path: Path, files):
        tsproj = files.tsproj(tmp_path / "M" / "M.tsproj", r"Plc1\Plc1.plcproj")
        assert twincat_project_paths(tsproj) == [tmp_path / "M" / "Plc1" / "Plc1.plcproj"]


class TestFindParentSolution:
    def test_finds_solution_through_tsproj(self, twincat_tree: Path):
        expected = (twincat_tree.parents[2] / "Machine.sln").resolve()
        assert find_parent_solution(twincat_tree) == expected

    def test_nearest_ancestor_wins(self, twincat_tree: Path, files):
        machine_dir = twincat_tree.parents[1]
        local = files.solution(machine_dir / "Local.sln", "Machine.tsproj")
        assert find_parent_solution(twincat_tree) == local.resolve()

    def test_sorted_name_order_within_directory(self, twincat_tree: Path, files):
        root = twincat_tree.parents[2]
        earlier = files.solution(root / "AAA.sln", r"Machine\Machine.tsproj")
        assert find_parent_solution(twincat_tree) == earlier.resolve()

    def test_skips_unrelated_solution(self, twincat_tree: Path, files):
        machine_dir = twincat_tree.parents[1]
        files.solution(machine_dir / "Other.sln", r"Elsewhere\X.plcproj")
        expected = (twincat_tree.parents[2] / "Machine.sln").resolve()
        assert find_parent_solution(twincat_tree) == expected

    def test_not_found(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "Lonely" / "Lonely.plcproj")
        with pytest.raises(SolutionNotFoundError, match="No solution file referencing"):
            find_parent_solution(project)

    def test_does_not_modify_tree(self, twincat_tree: Path):
        root = twincat_tree.parents[2]
        before = {p: p.stat().st_mtime_ns for p in root.rglob("*")}
        find_parent_solution(twincat_tree)
        assert {p: p.stat().st_mtime_ns for p in root.rglob("*")} == before


class TestSubmitParentSolution:
    def test_future_result(self, twincat_tree: Path):
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = submit_parent_solution(twincat_tree, executor)
            assert future.result() == (twincat_tree.parents[2] / "Machine.sln").resolve()

    def test_future_raises_not_found(self, tmp_path: Path, files):
        project = files.plcproj(tmp_path / "Lonely" / "Lonely.plcproj")
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = submit_parent_solution(project, executor)
            with pytest.raises(SolutionNotFoundError):
                future.result()
