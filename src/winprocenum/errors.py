"""Exceptions raised by the snapshot pipeline."""


class ProcEnumError(Exception):
    """Base class for winprocenum errors."""


class UnsupportedPlatformError(ProcEnumError):
    """The Win32 process API was requested on a non-Windows host."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Win32 process API is not available on {platform!r}")


class InvalidHandleError(ProcEnumError, ValueError):
    """A process handle in the invalid state was passed where a valid one is required."""

    def __init__(self, pid: int):
        self.pid = pid
        super().__init__(f"Process handle for pid {pid} is not valid")


# ========== OS call failures ==========


class OsCallError(ProcEnumError):
    """
    A Win32 call reported failure.

    Carries the last-error code captured immediately after the failing call.
    """

    def __init__(self, call: str, error_code: int, pid: int | None = None):
        self.call = call
        self.error_code = error_code
        self.pid = pid
        target = f" for pid {pid}" if pid is not None else ""
        super().__init__(f"{call} failed{target} (error {error_code})")


class OsEnumerationFailed(OsCallError):
    """Process id enumeration failed. Aborts the whole snapshot."""

    def __init__(self, error_code: int):
        super().__init__("EnumProcesses", error_code)


class NoModules(OsCallError):
    """Module enumeration failed or returned no modules."""

    def __init__(self, error_code: int, pid: int | None = None):
        super().__init__("EnumProcessModules", error_code, pid)


class NameResolutionFailed(OsCallError):
    """The base module name could not be read."""

    def __init__(self, error_code: int, pid: int | None = None):
        super().__init__("GetModuleBaseNameA", error_code, pid)
