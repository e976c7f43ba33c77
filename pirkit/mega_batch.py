"""A group of hashed data batches that are cached together."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

_SIZE = struct.Struct("<Q")


def _write_size(out: BinaryIO, value: int) -> None:
    out.write(_SIZE.pack(value))


def _write_string(out: BinaryIO, text: str) -> None:
    raw = text.encode("utf-8", "surrogateescape")
    _write_size(out, len(raw))
    out.write(raw)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError(f"truncated data: expected {size} bytes, got {len(data)}")
    return data


def _read_size(stream: BinaryIO) -> int:
    return _SIZE.unpack(_read_exact(stream, _SIZE.size))[0]


def _read_string(stream: BinaryIO) -> str:
    return _read_exact(stream, _read_size(stream)).decode("utf-8", "surrogateescape")


def _read_sizes(stream: BinaryIO) -> list[int]:
    count = _read_size(stream)
    raw = _read_exact(stream, count * _SIZE.size)
    return [value for (value,) in _SIZE.iter_unpack(raw)]


@dataclass
class MegaBatch:
    """Batches merged into one unit; ordered by total_size.

    Equality compares every field; < and > compare total_size only.
    """

    total_size: int = 0
    self_num: int = 0
    data_cache_name: str = ""
    batch_names: list[str] = field(default_factory=list)
    per_batch_size: list[int] = field(default_factory=list)
    batch_count: list[int] = field(default_factory=list)

    @classmethod
    def single(cls, name: str, size: int, count: int) -> MegaBatch:
        """A mega batch holding one batch of `size` rows numbered `count`."""
        return cls(
            total_size=size,
            batch_names=[name],
            per_batch_size=[size],
            batch_count=[count],
        )

    def __lt__(self, other: MegaBatch) -> bool:
        if not isinstance(other, MegaBatch):
            return NotImplemented
        return self.total_size < other.total_size

    def __gt__(self, other: MegaBatch) -> bool:
        if not isinstance(other, MegaBatch):
            return NotImplemented
        return self.total_size > other.total_size

    def __iadd__(self, other: MegaBatch) -> MegaBatch:
        if not isinstance(other, MegaBatch):
            return NotImplemented
        if other is not self:
            self.total_size += other.total_size
            self.batch_names.extend(other.batch_names)
            self.per_batch_size.extend(other.per_batch_size)
            self.batch_count.extend(other.batch_count)
        return self

    def serialize(self, out: BinaryIO) -> None:
        """Write this batch as little-endian 64-bit sizes and raw strings."""
        _write_size(out, self.total_size)
        _write_size(out, self.self_num)
        _write_string(out, self.data_cache_name)
        _write_size(out, len(self.batch_names))
        for name in self.batch_names:
            _write_string(out, name)
        for values in (self.per_batch_size, self.batch_count):
            _write_size(out, len(values))
            out.write(b"".join(_SIZE.pack(value) for value in values))

    @classmethod
    def deserialize(cls, stream: BinaryIO) -> MegaBatch:
        """Read one batch written by serialize; ValueError if data runs short."""
        total_size = _read_size(stream)
        self_num = _read_size(stream)
        data_cache_name = _read_string(stream)
        names = [_read_string(stream) for _ in range(_read_size(stream))]
        per_batch_size = _read_sizes(stream)
        batch_count = _read_sizes(stream)
        return cls(
            total_size=total_size,
            self_num=self_num,
            data_cache_name=data_cache_name,
            batch_names=names,
            per_batch_size=per_batch_size,
            batch_count=batch_count,
        )

    def __str__(self) -> str:
        return (
            f"MegaBatch(data_cache_name={self.data_cache_name},"
            f"total_size={self.total_size},self_num:{self.self_num},"
            f"batch_names:{','.join(self.batch_names)},"
            f"per_batch_size:{','.join(map(str, self.per_batch_size))},"
            f"batch_count:{','.join(map(str, self.batch_count))})"
        )