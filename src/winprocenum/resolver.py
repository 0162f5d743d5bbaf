"""Base module name resolution for an open process."""

import ctypes

from loguru import logger

from winprocenum.errors import InvalidHandleError, NameResolutionFailed, NoModules
from winprocenum.process_api import HMODULE, ProcessApi, module_buffer, name_buffer
from winprocenum.process_handle import ProcessHandle

DEFAULT_MODULE_CAPACITY = 1024
DEFAULT_NAME_CAPACITY = 256


class ModuleNameResolver:
    """
    Resolves a process to the base name of its main executable module.

    Two OS round-trips per process: EnumProcessModules, then
    GetModuleBaseNameA on the first module returned. The first module is taken
    to be the executable because that is the order Windows enumerates modules
    in; nothing in the API guarantees it.

    Both buffers have fixed capacities. Module lists longer than
    ``module_capacity`` are cut short and names longer than ``name_capacity``
    are truncated by the OS.
    """

    def __init__(
        self,
        api: ProcessApi,
        module_capacity: int = DEFAULT_MODULE_CAPACITY,
        name_capacity: int = DEFAULT_NAME_CAPACITY,
        encoding: str = "utf-8",
    ) -> None:
        self._api = api
        self._module_capacity = module_capacity
        self._name_capacity = name_capacity
        self._encoding = encoding

    def resolve(self, handle: ProcessHandle) -> str:
        """
        Get the base module name of the process behind ``handle``.

        Args:
            handle: A valid handle opened with query and read rights.

        Raises:
            InvalidHandleError: ``handle`` is not valid.
            NoModules: Module enumeration failed or found no modules.
            NameResolutionFailed: The name query wrote zero bytes.
        """
        if not handle.is_valid():
            raise InvalidHandleError(handle.pid)

        base_module = self._base_module(handle)
        return self._base_name(handle, base_module)

    def _base_module(self, handle: ProcessHandle) -> int:
        """Enumerate the process modules and return the first one."""
        modules = module_buffer(self._module_capacity)
        ok, bytes_needed = self._api.enum_process_modules(handle.value, modules)
        if not ok:
            raise NoModules(self._api.get_last_error(), handle.pid)

        module_count = bytes_needed // ctypes.sizeof(HMODULE)
        if module_count == 0:
            raise NoModules(self._api.get_last_error(), handle.pid)
        if module_count > self._module_capacity:
            logger.debug(
                f"pid {handle.pid} has {module_count} modules, "
                f"only the first {self._module_capacity} were read"
            )

        return modules[0]

    def _base_name(self, handle: ProcessHandle, module: int) -> str:
        """Read the base name of ``module`` and decode it permissively."""
        buffer = name_buffer(self._name_capacity)
        written = self._api.get_module_base_name(handle.value, module, buffer)
        if written == 0:
            raise NameResolutionFailed(self._api.get_last_error(), handle.pid)

        # Only the bytes the OS reported writing are part of the name
        raw = buffer.raw[: min(written, self._name_capacity)]
        return raw.decode(self._encoding, errors="replace")
