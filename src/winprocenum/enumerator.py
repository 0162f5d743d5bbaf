"""Process id enumeration."""

import ctypes

from loguru import logger

from winprocenum.errors import OsEnumerationFailed
from winprocenum.process_api import DWORD, ProcessApi, pid_buffer

DEFAULT_PID_CAPACITY = 1024


class PidEnumerator:
    """
    Lists the pids of all running processes.

    The pid buffer has a fixed capacity. On a host with more live processes
    than ``capacity`` the excess is dropped; no retry with a larger buffer is
    made.
    """

    def __init__(self, api: ProcessApi, capacity: int = DEFAULT_PID_CAPACITY) -> None:
        self._api = api
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        """Maximum number of pids a single call can return."""
        return self._capacity

    def list_pids(self) -> list[int]:
        """
        Enumerate live pids in the order the OS reports them.

        Raises:
            OsEnumerationFailed: EnumProcesses reported failure.
        """
        buffer = pid_buffer(self._capacity)
        ok, bytes_written = self._api.enum_processes(buffer)
        if not ok:
            raise OsEnumerationFailed(self._api.get_last_error())

        count = min(bytes_written // ctypes.sizeof(DWORD), self._capacity)
        if count == self._capacity:
            logger.debug(f"Pid buffer full ({count} entries), process list may be truncated")

        return list(buffer[:count])
