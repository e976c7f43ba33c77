"""Accumulates elapsed time per named phase, grouped by phase category."""

from __future__ import annotations

import json
import time
from enum import IntEnum
from typing import Callable

_UINT32_MASK = 0xFFFFFFFF


class ProType(IntEnum):
    NETWORK = 0
    LOAD_DB = 1
    ALGO = 2
    LOAD_CSV = 3

    def __str__(self) -> str:
        return self.name


class TimeTrack:
    """Durations, in whole milliseconds, recorded for one phase."""

    def __init__(self, pro_type: ProType = ProType.NETWORK) -> None:
        self.pro_type = ProType(pro_type)
        self._times: list[int] = []

    def count(self, diff: float) -> None:
        self._times.append(int(diff) & _UINT32_MASK)

    def num(self) -> int:
        return len(self._times)

    def sum(self) -> int:
        return sum(self._times) & _UINT32_MASK

    def avg(self) -> int:
        """Integer mean; raises ZeroDivisionError when nothing was recorded."""
        return self.sum() // self.num()

    def __str__(self) -> str:
        return (
            f"ProType: {self.pro_type} Num: {self.num()} "
            f"Avg: {self.avg()} Sum: {self.sum()}"
        )


def _monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class TimeProfiler:
    """Times consecutive phases: each count() closes the previous phase."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or _monotonic_ms
        self.tracks: dict[str, TimeTrack] = {}
        self._last_func = ""
        self._last_type = ProType.NETWORK
        self._start = 0.0
        self._disabled = False

    def _close_phase(self) -> None:
        if not self._last_func:
            return
        elapsed = self._clock() - self._start
        track = self.tracks.setdefault(self._last_func, TimeTrack(self._last_type))
        track.count(elapsed)

    def count(self, profile_name: str, pro_type: ProType) -> None:
        """Close the running phase and start timing `profile_name`."""
        if self._disabled:
            return
        self._close_phase()
        self._last_func = profile_name
        self._last_type = ProType(pro_type)
        self._start = self._clock()

    def flush(self) -> None:
        """Close the running phase, leaving none open."""
        self._close_phase()
        self._last_func = ""

    def disable(self) -> None:
        self._disabled = True

    def report(self) -> str:
        """Multi-line summary of every phase, ordered by name."""
        blocks = []
        for name in sorted(self.tracks):
            track = self.tracks[name]
            blocks.append(
                f"{name}, ProType: {track.pro_type}\n"
                f"Num: {track.num()}\n"
                f"Avg: {track.avg()}\n"
                f"Sum: {track.sum()}\n"
            )
        return "\n".join(blocks)

    def proto_string(self) -> bytes:
        """Encode total milliseconds per category, keyed by category name."""
        totals: dict[str, int] = {}
        for track in self.tracks.values():
            key = str(track.pro_type)
            totals[key] = (totals.get(key, 0) + track.sum()) & _UINT32_MASK
        ordered = dict(sorted(totals.items()))
        return json.dumps(ordered, separators=(",", ":")).encode("utf-8")


def parse_profile(data: bytes | str) -> dict[str, int]:
    """Decode the output of TimeProfiler.proto_string."""
    decoded = json.loads(data)
    if not isinstance(decoded, dict):
        raise ValueError("profile must be an object")
    for key, value in decoded.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"profile value for {key!r} must be an integer")
    return decoded