"""
Adapter registry — single point of automation adapter management.

Handles registration, lookup and mock mode. The pack pipeline never
constructs adapters itself; it asks the registry for one by name.
"""

from __future__ import annotations

import logging
from typing import Any

from plcpack.adapters.base import AutomationAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry for automation adapters.

    Features:
        - Register/unregister adapters by name
        - Mock mode: every lookup returns the mock adapter
        - Query adapter availability
    """

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, AutomationAdapter] = {}
        self._mock_mode = mock_mode
        self._mock_adapter: AutomationAdapter | None = None

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def set_mock_mode(self, enabled: bool, mock_adapter: AutomationAdapter | None = None) -> None:
        """Enable or disable mock mode.

        Args:
            enabled: Whether to use mock mode.
            mock_adapter: Optional custom mock adapter. If None, a default
                MockAutomationAdapter is created on first lookup.
        """
        self._mock_mode = enabled
        self._mock_adapter = mock_adapter

    def register(self, adapter: AutomationAdapter) -> None:
        """Register an adapter under its name."""
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def unregister(self, name: str) -> None:
        """Remove an adapter from the registry."""
        self._adapters.pop(name, None)

    def get(self, name: str) -> AutomationAdapter | None:
        """Look up an adapter by name, honoring mock mode."""
        if self._mock_mode:
            if self._mock_adapter is None:
                from plcpack.adapters.mock import MockAutomationAdapter

                self._mock_adapter = MockAutomationAdapter()
            return self._mock_adapter
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._adapters.keys())

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of all registered adapters."""
        status = {}
        for name, adapter in self._adapters.items():
            try:
                available = adapter.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": adapter.__class__.__name__,
            }
        return status


def default_registry(
    prog_id: str | None = None,
    suppress_ui: bool = True,
    mock_mode: bool = False,
) -> AdapterRegistry:
    """Build a registry holding the built-in adapters."""
    from plcpack.adapters.mock import MockAutomationAdapter
    from plcpack.adapters.twincat.automation import DEFAULT_PROG_ID, TwincatAutomationAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(
        TwincatAutomationAdapter(prog_id=prog_id or DEFAULT_PROG_ID, suppress_ui=suppress_ui)
    )
    registry.register(MockAutomationAdapter())
    return registry
