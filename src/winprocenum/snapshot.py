"""Process snapshot pipeline for winprocenum."""

from loguru import logger

from winprocenum.config import Settings, get_settings
from winprocenum.enumerator import PidEnumerator
from winprocenum.errors import NameResolutionFailed, NoModules
from winprocenum.models import ProcessRecord, Snapshot
from winprocenum.process_api import ProcessApi, Win32ProcessApi
from winprocenum.process_handle import ProcessHandle
from winprocenum.resolver import ModuleNameResolver


class SnapshotBuilder:
    """
    Builds a snapshot of (pid, name) pairs in a single pass.

    Only pid enumeration can fail the whole snapshot. A process that cannot be
    opened or named is left out without any error being reported, so a pid
    denied access and a pid that exited are indistinguishable in the result.
    At most one process handle is open at any time.
    """

    def __init__(
        self,
        api: ProcessApi,
        enumerator: PidEnumerator | None = None,
        resolver: ModuleNameResolver | None = None,
    ) -> None:
        """
        Initialize the SnapshotBuilder.

        Args:
            api: OS primitives used to open and close process handles.
            enumerator: Pid source. Defaults to a PidEnumerator over ``api``.
            resolver: Name source. Defaults to a ModuleNameResolver over ``api``.
        """
        self._api = api
        self._enumerator = enumerator or PidEnumerator(api)
        self._resolver = resolver or ModuleNameResolver(api)

    @classmethod
    def from_settings(cls, api: ProcessApi, settings: Settings) -> "SnapshotBuilder":
        """Create a builder with buffer capacities and encoding taken from ``settings``."""
        return cls(
            api,
            enumerator=PidEnumerator(api, capacity=settings.PID_CAPACITY),
            resolver=ModuleNameResolver(
                api,
                module_capacity=settings.MODULE_CAPACITY,
                name_capacity=settings.NAME_CAPACITY,
                encoding=settings.NAME_ENCODING,
            ),
        )

    def build_snapshot(self) -> Snapshot:
        """
        Collect every nameable process.

        Raises:
            OsEnumerationFailed: The pid list could not be read.
        """
        pids = self._enumerator.list_pids()
        records: list[ProcessRecord] = []

        for pid in pids:
            with ProcessHandle.open(pid, self._api) as handle:
                if not handle.is_valid():
                    logger.debug(f"Skipping pid {pid}: could not open process")
                    continue

                try:
                    name = self._resolver.resolve(handle)
                except (NoModules, NameResolutionFailed) as e:
                    # Protected, exited mid-scan, or unnamed
                    logger.debug(f"Skipping pid {pid}: {e}")
                    continue

            records.append(ProcessRecord(pid=pid, name=name))

        logger.debug(f"Snapshot built: {len(records)} of {len(pids)} processes named")
        return Snapshot(tuple(records))


def build_snapshot(api: ProcessApi | None = None, settings: Settings | None = None) -> Snapshot:
    """Take one snapshot of the running processes with the configured settings."""
    if api is None:
        api = Win32ProcessApi()
    if settings is None:
        settings = get_settings()
    return SnapshotBuilder.from_settings(api, settings).build_snapshot()
