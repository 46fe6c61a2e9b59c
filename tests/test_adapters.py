"""
Tests for the automation adapter protocol, registry, mock and TwinCAT adapters.
"""

import threading
from pathlib import Path

import pytest

from plcpack.adapters.mock import MockAutomationAdapter
from plcpack.adapters.registry import AdapterRegistry, default_registry
from plcpack.adapters.twincat.automation import (
    DEFAULT_PROG_ID,
    TwincatAutomationAdapter,
    plc_tree_path,
)

# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAutomationAdapter:
    def test_default_success(self, tmp_path: Path):
        mock = MockAutomationAdapter()
        with mock.open() as handle:
            library = handle.save_library(
                tmp_path / "Plc1.plcproj", tmp_path / "out", tmp_path / "Machine.sln"
            )
        assert library == str(tmp_path / "out" / "Plc1.library")
        assert Path(library).read_bytes() == mock.library_content
        assert mock.call_count == 1

    def test_call_log_records_arguments(self, tmp_path: Path):
        mock = MockAutomationAdapter()
        with mock.open() as handle:
            handle.save_library("a/Plc1.plcproj", tmp_path, "a/M.sln")
        call = mock.call_log[0]
        assert call.project_path == Path("a/Plc1.plcproj")
        assert call.solution_path == Path("a/M.sln")
        assert call.thread_name == threading.current_thread().name

    def test_set_failure(self, tmp_path: Path):
        mock = MockAutomationAdapter()
        mock.set_failure("COM server busy")
        with mock.open() as handle:
            with pytest.raises(RuntimeError, match="COM server busy"):
                handle.save_library(tmp_path / "P.plcproj", tmp_path, tmp_path / "M.sln")
        assert mock.call_count == 1

    def test_set_empty(self, tmp_path: Path):
        mock = MockAutomationAdapter()
        mock.set_empty()
        with mock.open() as handle:
            assert handle.save_library(tmp_path / "P.plcproj", tmp_path, tmp_path / "M.sln") == ""
        assert list(tmp_path.iterdir()) == []

    def test_handle_released_on_error(self):
        mock = MockAutomationAdapter()
        with pytest.raises(KeyError):
            with mock.open():
                raise KeyError("boom")
        assert mock.open_count == 1
        assert mock.release_count == 1

    def test_reset(self, tmp_path: Path):
        mock = MockAutomationAdapter()
        mock.set_failure()
        with mock.open() as handle:
            with pytest.raises(RuntimeError):
                handle.save_library(tmp_path / "P.plcproj", tmp_path, tmp_path / "M.sln")
        mock.reset()
        assert mock.call_count == 0
        assert mock.error is None
        assert mock.open_count == 0

    def test_is_available(self):
        assert MockAutomationAdapter(available=True).is_available()
        assert not MockAutomationAdapter(available=False).is_available()


# ── TwinCAT Adapter Tests ───────────────────────────────────────────


class TestTwincatAutomationAdapter:
    def test_defaults(self):
        adapter = TwincatAutomationAdapter()
        assert adapter.name == "twincat"
        assert adapter.prog_id == DEFAULT_PROG_ID

    def test_unavailable_off_windows(self, monkeypatch):
        monkeypatch.setattr("sys.platform", "linux")
        assert not TwincatAutomationAdapter().is_available()

    def test_open_raises_when_unavailable(self, monkeypatch):
        monkeypatch.setattr("sys.platform", "linux")
        adapter = TwincatAutomationAdapter()
        with pytest.raises(RuntimeError, match="requires Windows"):
            with adapter.open():
                pass

    def test_plc_tree_path(self):
        assert plc_tree_path("Plc1") == "TIPC^Plc1^Plc1 Project"

    def test_repr(self):
        assert repr(TwincatAutomationAdapter()) == "<TwincatAutomationAdapter name='twincat'>"


# ── Registry Tests ──────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_register_and_get(self):
        registry = AdapterRegistry()
        mock = MockAutomationAdapter(adapter_name="test")
        registry.register(mock)
        assert registry.get("test") is mock
        assert "test" in registry.list_adapters()

    def test_get_missing(self):
        assert AdapterRegistry().get("nonexistent") is None

    def test_unregister(self):
        registry = AdapterRegistry()
        registry.register(MockAutomationAdapter(adapter_name="temp"))
        registry.unregister("temp")
        assert registry.get("temp") is None

    def test_adapter_status(self):
        registry = AdapterRegistry()
        registry.register(MockAutomationAdapter(adapter_name="available", available=True))
        registry.register(MockAutomationAdapter(adapter_name="unavailable", available=False))
        status = registry.adapter_status()
        assert status["available"]["available"] is True
        assert status["unavailable"]["available"] is False
        assert status["available"]["type"] == "MockAutomationAdapter"

    def test_mock_mode_default(self):
        registry = AdapterRegistry(mock_mode=True)
        adapter = registry.get("twincat")
        assert isinstance(adapter, MockAutomationAdapter)
        assert registry.get("anything") is adapter

    def test_mock_mode_with_custom_mock(self):
        registry = AdapterRegistry()
        registry.register(MockAutomationAdapter(adapter_name="twincat"))
        custom = MockAutomationAdapter(adapter_name="custom")
        registry.set_mock_mode(True, mock_adapter=custom)
        assert registry.mock_mode
        assert registry.get("twincat") is custom

    def test_default_registry(self):
        registry = default_registry(prog_id="TcXaeShell.DTE.17.0")
        assert sorted(registry.list_adapters()) == ["mock", "twincat"]
        twincat = registry.get("twincat")
        assert isinstance(twincat, TwincatAutomationAdapter)
        assert twincat.prog_id == "TcXaeShell.DTE.17.0"
