"""Shared fixtures for winprocenum tests."""

import ctypes

import pytest
from loguru import logger

from winprocenum.config import get_settings
from winprocenum.process_api import DWORD, HMODULE


class FakeProcessApi:
    """
    In-memory ProcessApi.

    Writes into the same ctypes buffers the Win32 binding would, and records
    every open and close so tests can check handle accounting.
    """

    def __init__(
        self,
        pids: list[int] | None = None,
        handles: dict[int, int | None] | None = None,
        modules: dict[int, list[int]] | None = None,
        names: dict[int, bytes] | None = None,
        reported_name_lengths: dict[int, int] | None = None,
        enum_ok: bool = True,
        last_error: int = 0,
    ) -> None:
        self.pids = pids or []
        self.handles = handles or {}  # pid -> handle, missing means open fails
        self.modules = modules or {}  # handle -> module handles, missing means call fails
        self.names = names or {}  # module -> base name bytes, missing means call fails
        self.reported_name_lengths = reported_name_lengths or {}
        self.enum_ok = enum_ok
        self.last_error = last_error

        self.opened: list[tuple[int, int]] = []
        self.closed: list[int] = []
        self.module_calls: list[int] = []
        self.name_calls: list[tuple[int, int]] = []
        self.live_handles: set[int] = set()
        self.max_live_handles = 0

    def enum_processes(self, buffer: ctypes.Array) -> tuple[bool, int]:
        if not self.enum_ok:
            return False, 0
        count = min(len(self.pids), len(buffer))
        for i in range(count):
            buffer[i] = self.pids[i]
        return True, count * ctypes.sizeof(DWORD)

    def open_process(self, access: int, pid: int) -> int | None:
        self.opened.append((access, pid))
        handle = self.handles.get(pid)
        if handle is not None:
            self.live_handles.add(handle)
            self.max_live_handles = max(self.max_live_handles, len(self.live_handles))
        return handle

    def close_handle(self, handle: int) -> bool:
        self.closed.append(handle)
        self.live_handles.discard(handle)
        return True

    def enum_process_modules(self, handle: int, buffer: ctypes.Array) -> tuple[bool, int]:
        self.module_calls.append(handle)
        modules = self.modules.get(handle)
        if modules is None:
            return False, 0
        for i, module in enumerate(modules[: len(buffer)]):
            buffer[i] = module
        # Like the real call, report the size needed for all modules
        return True, len(modules) * ctypes.sizeof(HMODULE)

    def get_module_base_name(self, handle: int, module: int, buffer: ctypes.Array) -> int:
        self.name_calls.append((handle, module))
        name = self.names.get(module)
        if name is None:
            return 0
        data = name[: len(buffer)]
        ctypes.memmove(buffer, data, len(data))
        return self.reported_name_lengths.get(module, len(data))

    def get_last_error(self) -> int:
        return self.last_error


@pytest.fixture
def make_api():
    """Factory for FakeProcessApi instances."""
    return FakeProcessApi


@pytest.fixture
def named_api():
    """Three processes: two nameable, one that cannot be opened."""
    return FakeProcessApi(
        pids=[4, 10, 20],
        handles={10: 0x100, 20: 0x200},
        modules={0x100: [0x7000, 0x7100], 0x200: [0x8000]},
        names={0x7000: b"svchost.exe", 0x8000: b"explorer.exe"},
    )


@pytest.fixture(autouse=True)
def _reset_globals():
    """Reload settings per test and drop any log sinks a test installed."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logger.remove()
