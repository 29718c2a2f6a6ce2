"""
models.py - Data model for window snapshots and query criteria.

All types are immutable. Records belong to exactly one snapshot and are never
patched; a refresh produces new records.
"""
from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, NamedTuple

# Native window handle: HWND/XID/CGWindowID as int, or a backend specific string.
type Handle = int | str


class RawWindow(NamedTuple):
    """One row of provider output, in enumeration order."""
    handle: Handle
    title: str
    class_name: str
    pid: int
    process_name: str
    process_file_path: str
    x: int
    y: int
    width: int = 0
    height: int = 0


@dataclass(frozen=True, slots=True)
class Position:
    """Top-left screen coordinates of a window, plus its size."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass(frozen=True, slots=True)
class WindowRecord:
    """A window as captured in one snapshot, addressed by its 1-based `index`."""
    handle: Handle
    index: int
    title: str = ""
    class_name: str = ""
    pid: int = 0
    process_name: str = ""
    process_file_path: str = ""
    position: Position = field(default_factory=Position)

    @classmethod
    def from_raw(cls, raw: RawWindow, index: int) -> WindowRecord:
        return cls(
            handle=raw.handle,
            index=index,
            title=raw.title or "",
            class_name=raw.class_name or "",
            pid=int(raw.pid or 0),
            process_name=raw.process_name or "",
            process_file_path=str(raw.process_file_path or ""),
            position=Position(int(raw.x), int(raw.y), int(raw.width), int(raw.height)),
        )

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "handle": self.handle,
            "pid": self.pid,
            "title": self.title,
            "class_name": self.class_name,
            "process_name": self.process_name,
            "process_file_path": self.process_file_path,
            "position": {
                "x": self.position.x, "y": self.position.y,
                "width": self.position.width, "height": self.position.height,
            },
        }


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Independent optional constraints; unset fields match anything."""
    pid: int | None = None
    title_contains: str | None = None
    class_name_contains: str | None = None
    process_name_contains: str | None = None
    process_file_contains: str | None = None

    def is_empty(self) -> bool:
        return all(
            value is None for value in (
                self.pid, self.title_contains, self.class_name_contains,
                self.process_name_contains, self.process_file_contains,
            )
        )


class SortDirection(Enum):
    IGNORE = 0
    ASCENDING = 1
    DESCENDING = -1


class Axis(str, Enum):
    X = "x"
    Y = "y"


type AxisOrder = tuple[Axis, SortDirection]


@dataclass(frozen=True, slots=True)
class SortCriteria:
    """
    Sort keys in fixed priority: pid, then title, then the position axes in
    the order given. IGNORE keys are skipped.
    """
    pid: SortDirection = SortDirection.IGNORE
    title: SortDirection = SortDirection.IGNORE
    position: tuple[AxisOrder, ...] = ()

    def is_active(self) -> bool:
        return (
            self.pid is not SortDirection.IGNORE
            or self.title is not SortDirection.IGNORE
            or any(direction is not SortDirection.IGNORE for _, direction in self.position)
        )


@dataclass(frozen=True, slots=True)
class Selection:
    """
    Either "all" or a canonical ascending set of 1-based indices.

    Explicit sets are held as sorted, merged, inclusive intervals so that a
    wide range such as "1-1000000" costs two integers, not a million.
    """
    _intervals: tuple[tuple[int, int], ...] | None = None

    @classmethod
    def all(cls) -> Selection:
        return cls(None)

    @classmethod
    def from_ranges(cls, ranges: Iterable[tuple[int, int]]) -> Selection:
        merged: list[list[int]] = []
        for start, end in sorted(ranges):
            if merged and start <= merged[-1][1] + 1:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])
        return cls(tuple((start, end) for start, end in merged))

    @classmethod
    def of(cls, indices: Iterable[int]) -> Selection:
        return cls.from_ranges((i, i) for i in indices)

    @property
    def is_all(self) -> bool:
        return self._intervals is None

    @property
    def intervals(self) -> tuple[tuple[int, int], ...]:
        return self._intervals or ()

    @property
    def indices(self) -> tuple[int, ...]:
        """Explicit indices, ascending. Empty for the "all" selection."""
        return tuple(i for start, end in self.intervals for i in range(start, end + 1))

    def resolve(self, length: int) -> Iterator[int]:
        """Yields the 1-based indices that exist in a sequence of `length` items."""
        if self.is_all:
            yield from range(1, length + 1)
            return
        for start, end in self.intervals:
            if start > length:
                return
            yield from range(start, min(end, length) + 1)

    def __contains__(self, index: object) -> bool:
        if not isinstance(index, int):
            return False
        if self.is_all:
            return index >= 1
        pos = bisect.bisect_right(self.intervals, (index, float("inf"))) - 1
        return pos >= 0 and self.intervals[pos][0] <= index <= self.intervals[pos][1]

    def __str__(self) -> str:
        if self.is_all:
            return "all"
        return ",".join(str(s) if s == e else f"{s}-{e}" for s, e in self.intervals)
