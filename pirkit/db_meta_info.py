"""Metadata describing how a data set was split into hashed, merged batches."""

from __future__ import annotations

import heapq
import json
import logging
import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Sequence

from pirkit.mega_batch import MegaBatch

logger = logging.getLogger(__name__)

PER_BATCH_MIN_SIZE = 1_000_000
PART_RESULT_NUM = 20

_SIZE = struct.Struct("<Q")


def _write_size(out: BinaryIO, value: int) -> None:
    out.write(_SIZE.pack(value))


def _write_string(out: BinaryIO, text: str) -> None:
    raw = text.encode("utf-8", "surrogateescape")
    _write_size(out, len(raw))
    out.write(raw)


def _write_strings(out: BinaryIO, values: Sequence[str]) -> None:
    _write_size(out, len(values))
    for value in values:
        _write_string(out, value)


def _write_sizes(out: BinaryIO, values: Sequence[int]) -> None:
    _write_size(out, len(values))
    out.write(b"".join(_SIZE.pack(value) for value in values))


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError(f"truncated data: expected {size} bytes, got {len(data)}")
    return data


def _read_size(stream: BinaryIO) -> int:
    return _SIZE.unpack(_read_exact(stream, _SIZE.size))[0]


def _read_string(stream: BinaryIO) -> str:
    return _read_exact(stream, _read_size(stream)).decode("utf-8", "surrogateescape")


def _read_strings(stream: BinaryIO) -> list[str]:
    return [_read_string(stream) for _ in range(_read_size(stream))]


def _read_sizes(stream: BinaryIO) -> list[int]:
    count = _read_size(stream)
    raw = _read_exact(stream, count * _SIZE.size)
    return [value for (value,) in _SIZE.iter_unpack(raw)]


def create_meta_info_path(meta_path: str | os.PathLike[str]) -> str:
    """Path of the metadata file inside a meta directory."""
    return f"{os.fspath(meta_path)}/metainfo"


def create_batch_name(key: str, meta_path: str | os.PathLike[str], num: int) -> str:
    """Path of the cache file for merged batch `num`."""
    return f"{os.fspath(meta_path)}/mega_btch.{num}"


def _lookup(table: Sequence[int], index: int) -> int:
    if index < 0:
        raise IndexError(f"batch index out of range: {index}")
    return table[index]


@dataclass
class DbMetaInfo:
    """Maps hashed batch numbers onto merged batches and persists the mapping."""

    key: str = ""
    meta_path: str = ""
    key_columns: list[str] = field(default_factory=list)
    label_columns: list[str] = field(default_factory=list)
    mega_batches: list[MegaBatch] = field(default_factory=list)
    total_batch_size: int = 0
    merged_batch_size: int = 0
    batch_hash: list[int] = field(default_factory=list)

    def set_batch(self, batch_names: Sequence[str], num_count: Sequence[int]) -> None:
        """Record the hashed batches, merge the small ones and build the table."""
        self.total_batch_size = len(batch_names)
        self.merge_batch(batch_names, num_count)
        self.init_hash_table()

    def merge_batch(self, batch_names: Iterable[str], num_count: Iterable[int]) -> None:
        """Merge the two smallest batches while the smallest is under the minimum."""
        heap: list[tuple[int, int, MegaBatch]] = []
        for order, (name, count) in enumerate(zip(batch_names, num_count, strict=True)):
            logger.info("batch %d name:%s count:%d", order, name, count)
            heapq.heappush(heap, (count, order, MegaBatch.single(name, count, order)))
        tie = len(heap)
        while len(heap) > 1 and heap[0][0] < PER_BATCH_MIN_SIZE:
            _, _, first = heapq.heappop(heap)
            _, _, second = heapq.heappop(heap)
            first += second
            heapq.heappush(heap, (first.total_size, tie, first))
            tie += 1
        real_count = 0
        while heap:
            _, _, batch = heapq.heappop(heap)
            batch.self_num = real_count
            batch.data_cache_name = create_batch_name(self.key, self.meta_path, real_count)
            self.mega_batches.append(batch)
            real_count += 1
        for index, batch in enumerate(self.mega_batches):
            logger.info("merged batch %d: %s", index, batch)

    def init_hash_table(self) -> None:
        """Point every hashed batch number at the merged batch that holds it."""
        size = self.total_batch_size
        table = self.batch_hash[:size]
        table.extend([0] * (size - len(table)))
        self.merged_batch_size = len(self.mega_batches)
        for batch in self.mega_batches:
            for count in batch.batch_count:
                table[count] = batch.self_num
        self.batch_hash = table

    def get_merged_batch(self, expect_batch: int) -> int:
        return _lookup(self.batch_hash, expect_batch)

    def serialize(self, filename: str | os.PathLike[str]) -> None:
        """Write the metadata to a binary file."""
        with open(filename, "wb") as out:
            _write_string(out, self.key)
            _write_string(out, self.meta_path)
            _write_size(out, self.total_batch_size)
            _write_size(out, self.merged_batch_size)
            _write_strings(out, self.key_columns)
            _write_strings(out, self.label_columns)
            _write_sizes(out, self.batch_hash)
            _write_size(out, len(self.mega_batches))
            for batch in self.mega_batches:
                batch.serialize(out)

    def deserialize(self, filename: str | os.PathLike[str]) -> None:
        """Replace this metadata with the contents of a file written by serialize."""
        with open(filename, "rb") as stream:
            key = _read_string(stream)
            meta_path = _read_string(stream)
            total_batch_size = _read_size(stream)
            merged_batch_size = _read_size(stream)
            key_columns = _read_strings(stream)
            label_columns = _read_strings(stream)
            batch_hash = _read_sizes(stream)
            mega_batches = [
                MegaBatch.deserialize(stream) for _ in range(_read_size(stream))
            ]
        if merged_batch_size == 0:
            logger.info(
                "merged batch size is 0, using mega batch count %d", len(mega_batches)
            )
            merged_batch_size = len(mega_batches)
        self.key = key
        self.meta_path = meta_path
        self.total_batch_size = total_batch_size
        self.merged_batch_size = merged_batch_size
        self.key_columns = key_columns
        self.label_columns = label_columns
        self.batch_hash = batch_hash
        self.mega_batches = mega_batches


@dataclass
class DbBatchHashHelper:
    """Client-side copy of the batch table received from the server."""

    batch_hash: list[int] = field(default_factory=list)
    label_columns: list[str] = field(default_factory=list)
    total_batch_size: int = 0
    merged_batch_size: int = 0
    repeat_count: int = 0

    @staticmethod
    def serialize_batch_hash(info: DbMetaInfo) -> bytes:
        """Encode the batch table, server labels and batch sizes of `info`."""
        message = {
            "batch_hash": list(info.batch_hash),
            "server_labels": list(info.label_columns),
            "merged_batch_size": info.merged_batch_size,
            "total_batch_size": info.total_batch_size,
        }
        return json.dumps(message, separators=(",", ":")).encode("utf-8")

    def deserialize_batch_hash(self, data: bytes | str) -> None:
        """Load a message produced by serialize_batch_hash; missing fields are empty."""
        try:
            message = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError(f"malformed batch hash message: {exc}") from None
        if not isinstance(message, dict):
            raise ValueError("batch hash message must be an object")
        self.batch_hash = [int(value) for value in message.get("batch_hash", [])]
        self.label_columns = [str(value) for value in message.get("server_labels", [])]
        self.total_batch_size = int(message.get("total_batch_size", 0))
        self.merged_batch_size = int(message.get("merged_batch_size", 0))

    def get_merged_batch(self, expect_batch: int) -> int:
        return _lookup(self.batch_hash, expect_batch)