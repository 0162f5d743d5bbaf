"""Scoped process handle."""

from winprocenum.process_api import (
    PROCESS_QUERY_LIMITED_INFORMATION,
    PROCESS_VM_READ,
    ProcessApi,
)

# Read-only introspection rights, never write or terminate
QUERY_ACCESS = PROCESS_QUERY_LIMITED_INFORMATION | PROCESS_VM_READ

_OPEN_KEY = object()


class ProcessHandle:
    """
    Owns one process handle opened for query and read access.

    Obtain instances with ``ProcessHandle.open``. Opening a protected or
    already-exited process is routine and leaves the handle invalid instead of
    raising; check ``is_valid()`` before use.

    The handle is released exactly once: by ``close()``, at the end of a
    ``with`` block, or when the object is garbage collected, whichever comes
    first. After release the wrapped value is ``None``.
    """

    __slots__ = ("_pid", "_handle", "_api")

    def __init__(self, pid: int, handle: int | None, api: ProcessApi, *, _key: object = None):
        if _key is not _OPEN_KEY:
            raise TypeError("ProcessHandle must be created with ProcessHandle.open()")
        self._pid = pid
        self._handle = handle or None
        self._api = api

    @classmethod
    def open(cls, pid: int, api: ProcessApi) -> "ProcessHandle":
        """Open ``pid`` with least-privilege query rights."""
        return cls(pid, api.open_process(QUERY_ACCESS, pid), api, _key=_OPEN_KEY)

    @property
    def pid(self) -> int:
        """The pid this handle was opened for."""
        return self._pid

    @property
    def value(self) -> int | None:
        """The raw OS handle, or None when invalid."""
        return self._handle

    def is_valid(self) -> bool:
        """Check if the handle is open."""
        return self._handle is not None

    def close(self) -> None:
        """Release the handle. Safe to call any number of times."""
        handle, self._handle = self._handle, None
        if handle is not None:
            self._api.close_handle(handle)

    def __enter__(self) -> "ProcessHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        # Attributes are missing if __init__ raised
        if getattr(self, "_handle", None) is not None:
            self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_valid() else "invalid"
        return f"ProcessHandle(pid={self._pid}, {state})"
