"""
Pack use case — turn a PLC project into a NuGet package.

This is the top-level orchestrator: it validates the request, picks a
pipeline from the input's file kind, exports the compiled library
through the automation session, wraps it into a ``.nupkg`` and always
removes the exported library afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from plcpack.adapters.registry import AdapterRegistry, default_registry
from plcpack.core.models.package import PackRequest
from plcpack.core.services import messages
from plcpack.core.services.automation_session import AutomationSession
from plcpack.core.services.errors import PackagingError, UnsupportedOperationError
from plcpack.core.services.package_builder import DEFAULT_LIBRARY_TARGET, PackageBuilder
from plcpack.core.services.project_descriptor import read_project_descriptor

logger = logging.getLogger(__name__)

# Inputs that are neither a PLC project nor a nuspec are accepted and
# ignored. Callers rely on this for mixed file lists.
# TODO: decide whether unknown inputs should fail once the nuspec pipeline exists.
PASS_THROUGH_RESULT = True

DEFAULT_ADAPTER = "twincat"


class PackageService:
    """Packs PLC projects into NuGet packages.

    Args:
        registry: Adapter registry to take the automation adapter from.
            Defaults to the built-in adapters.
        adapter_name: Name of the automation adapter to use.
        library_target: Archive directory the library is staged under.
    """

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        adapter_name: str = DEFAULT_ADAPTER,
        library_target: str = DEFAULT_LIBRARY_TARGET,
    ):
        self._registry = registry if registry is not None else default_registry()
        self._adapter_name = adapter_name
        self._library_target = library_target

    def pack(self, request: PackRequest) -> bool:
        """Blocking form of ``pack_async``.

        Raises:
            RuntimeError: If called while an event loop is running in
                this thread; await ``pack_async`` there instead.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.pack_async(request))
        raise RuntimeError("pack() cannot run inside an event loop; await pack_async() instead")

    async def pack_async(self, request: PackRequest) -> bool:
        """Package the input named by the request.

        Returns:
            True if successful (or nothing to do), otherwise False.

        Raises:
            ValueError: If ``path`` or ``output_directory`` is empty.
            UnsupportedOperationError: If ``path`` is a ``.nuspec`` file.
        """
        if not request.path:
            raise ValueError("path must not be empty")
        if not request.output_directory:
            raise ValueError("output_directory must not be empty")

        if request.is_plc_project:
            return await self._pack_from_project_file(request)
        if request.is_nuspec:
            return await self._pack_from_nuspec_file(request)

        _logger_for(request).debug(messages.PASS_THROUGH, request.path)
        return PASS_THROUGH_RESULT

    async def _pack_from_nuspec_file(self, request: PackRequest) -> bool:
        raise UnsupportedOperationError(messages.NUSPEC_NOT_SUPPORTED % request.path)

    async def _pack_from_project_file(self, request: PackRequest) -> bool:
        log = _logger_for(request)
        library = await asyncio.to_thread(self._save_library, request, log)

        if not library:
            log.error(messages.FAILED_TO_SAVE_LIBRARY, request.path)
            return False

        try:
            return self._build_package(request, library, log)
        finally:
            # Delete the library once we are done packing.
            Path(library).unlink(missing_ok=True)

    def _save_library(self, request: PackRequest, log: logging.Logger) -> str:
        adapter = self._registry.get(self._adapter_name)
        if adapter is None:
            log.error("No automation adapter registered for '%s'", self._adapter_name)
            return ""

        session = AutomationSession(adapter, logger=log)
        return session.export_library(request.path, request.output_directory, request.solution)

    def _build_package(self, request: PackRequest, library: str, log: logging.Logger) -> bool:
        builder = PackageBuilder(library_target=self._library_target, logger=log)
        try:
            descriptor = read_project_descriptor(Path(request.path))
            builder.build(descriptor, library, request.output_directory, request.path)
        except PackagingError as e:
            e.log_with(log)
            return False
        return True


def _logger_for(request: PackRequest) -> logging.Logger:
    return request.logger if request.logger is not None else logger
