"""
Win32 process primitives used by the snapshot pipeline.

Everything above this module talks to the OS only through ``ProcessApi``.
Porting to another OS means providing another implementation of it.
"""

import ctypes
import sys
from typing import Protocol

from winprocenum.errors import UnsupportedPlatformError

DWORD = ctypes.c_uint32
HANDLE = ctypes.c_void_p
HMODULE = ctypes.c_void_p

PROCESS_VM_READ = 0x0010
PROCESS_QUERY_LIMITED_INFORMATION = 0x1000


def pid_buffer(capacity: int) -> ctypes.Array:
    """Allocate a zeroed DWORD array for EnumProcesses."""
    return (DWORD * capacity)()


def module_buffer(capacity: int) -> ctypes.Array:
    """Allocate a zeroed HMODULE array for EnumProcessModules."""
    return (HMODULE * capacity)()


def name_buffer(capacity: int) -> ctypes.Array:
    """Allocate a zeroed byte buffer for GetModuleBaseNameA."""
    return ctypes.create_string_buffer(capacity)


class ProcessApi(Protocol):
    """The OS calls needed to name every running process."""

    def enum_processes(self, buffer: ctypes.Array) -> tuple[bool, int]:
        """Fill ``buffer`` with live pids. Returns (succeeded, bytes written)."""
        ...

    def open_process(self, access: int, pid: int) -> int | None:
        """Open ``pid`` with ``access`` rights. Returns the handle or None."""
        ...

    def close_handle(self, handle: int) -> bool:
        ...

    def enum_process_modules(self, handle: int, buffer: ctypes.Array) -> tuple[bool, int]:
        """Fill ``buffer`` with module handles. Returns (succeeded, bytes needed)."""
        ...

    def get_module_base_name(self, handle: int, module: int, buffer: ctypes.Array) -> int:
        """Write the module's base name into ``buffer``. Returns bytes written, 0 on failure."""
        ...

    def get_last_error(self) -> int:
        ...


class Win32ProcessApi:
    """
    ``ProcessApi`` bound to psapi.dll and kernel32.dll through ctypes.

    The DLLs are loaded with ``use_last_error=True`` so ctypes saves the
    thread's last-error code right after every foreign call. ``get_last_error``
    must be read before making another call through this object.
    """

    def __init__(self) -> None:
        if sys.platform != "win32":
            raise UnsupportedPlatformError(sys.platform)

        self._kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        self._psapi = ctypes.WinDLL("psapi", use_last_error=True)

        self._enum_processes = self._psapi.EnumProcesses
        self._enum_processes.argtypes = [ctypes.POINTER(DWORD), DWORD, ctypes.POINTER(DWORD)]
        self._enum_processes.restype = ctypes.c_int

        self._open_process = self._kernel32.OpenProcess
        self._open_process.argtypes = [DWORD, ctypes.c_int, DWORD]
        self._open_process.restype = HANDLE

        self._close_handle = self._kernel32.CloseHandle
        self._close_handle.argtypes = [HANDLE]
        self._close_handle.restype = ctypes.c_int

        self._enum_process_modules = self._psapi.EnumProcessModules
        self._enum_process_modules.argtypes = [
            HANDLE,
            ctypes.POINTER(HMODULE),
            DWORD,
            ctypes.POINTER(DWORD),
        ]
        self._enum_process_modules.restype = ctypes.c_int

        self._get_module_base_name = self._psapi.GetModuleBaseNameA
        self._get_module_base_name.argtypes = [HANDLE, HMODULE, ctypes.POINTER(ctypes.c_char), DWORD]
        self._get_module_base_name.restype = DWORD

    def enum_processes(self, buffer: ctypes.Array) -> tuple[bool, int]:
        written = DWORD()
        ok = self._enum_processes(buffer, ctypes.sizeof(buffer), ctypes.byref(written))
        return bool(ok), written.value

    def open_process(self, access: int, pid: int) -> int | None:
        # restype HANDLE maps NULL to None
        return self._open_process(access, False, pid)

    def close_handle(self, handle: int) -> bool:
        return bool(self._close_handle(handle))

    def enum_process_modules(self, handle: int, buffer: ctypes.Array) -> tuple[bool, int]:
        needed = DWORD()
        ok = self._enum_process_modules(handle, buffer, ctypes.sizeof(buffer), ctypes.byref(needed))
        return bool(ok), needed.value

    def get_module_base_name(self, handle: int, module: int, buffer: ctypes.Array) -> int:
        return self._get_module_base_name(handle, module, buffer, len(buffer))

    def get_last_error(self) -> int:
        return ctypes.get_last_error()
