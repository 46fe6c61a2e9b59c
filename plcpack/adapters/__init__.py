"""Adapters — bindings for the external automation interface.

Public re-exports for convenient access.
"""

from plcpack.adapters.base import AutomationAdapter, AutomationHandle
from plcpack.adapters.mock import MockAutomationAdapter
from plcpack.adapters.registry import AdapterRegistry

__all__ = [
    "AdapterRegistry",
    "AutomationAdapter",
    "AutomationHandle",
    "MockAutomationAdapter",
]
