"""Data models for winprocenum."""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable (pid, name) pair for one resolved process."""

    pid: int  # u32 as reported by EnumProcesses
    name: str


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    One-shot result of a single enumeration pass.

    Records keep the order the OS enumerated the pids in. They are not sorted
    and no uniqueness is enforced.
    """

    records: tuple[ProcessRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ProcessRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> ProcessRecord:
        return self.records[index]

    def pids(self) -> list[int]:
        """Get the pids of all records, in snapshot order."""
        return [record.pid for record in self.records]
