"""Buffered writer for delimited key/label record files."""

from __future__ import annotations

import os
from pathlib import Path
from types import TracebackType
from typing import Iterable

MAX_ITEM_SIZE = 4096


class BatchWriter:
    """Writes a header row, then one row per key with its label values.

    Rows are buffered and written every MAX_ITEM_SIZE items and on release.
    With the client filter enabled, each row is written at once and only the
    label columns this writer was created with are kept, picked by name out
    of the server's full label list.
    """

    def __init__(
        self,
        file_path: str | os.PathLike[str],
        fields: Iterable[str],
        labels: Iterable[str],
        field_delimiter: str = ",",
        line_delimiter: str = "\n",
    ) -> None:
        if len(field_delimiter) != 1 or len(line_delimiter) != 1:
            raise ValueError("delimiters must be single characters")
        self.file_path = Path(file_path)
        self.fields = list(fields)
        self.labels = list(labels)
        self._field_delimiter = field_delimiter
        self._line_delimiter = line_delimiter
        self._buffer: list[str] = []
        self._pending = 0
        self._total = 0
        self._label_index: list[int] | None = None
        self._out = open(self.file_path, "w", encoding="utf-8", newline="")
        self._write_header()

    def _write_header(self) -> None:
        header = self._field_delimiter.join([*self.fields, *self.labels])
        self._out.write(header + self._line_delimiter)

    @property
    def total_count(self) -> int:
        """Number of rows flushed to the file so far."""
        return self._total

    @property
    def closed(self) -> bool:
        return self._out.closed

    def enable_client_filter(self, server_labels: Iterable[str]) -> None:
        """Keep only this writer's labels, located by name in `server_labels`.

        A label the server does not have maps to the server's first column.
        """
        positions = {name: index for index, name in enumerate(server_labels)}
        self._label_index = [positions.get(name, 0) for name in self.labels]

    def add_item(self, key_values: str, label_values: str) -> None:
        if self._out.closed:
            raise ValueError(f"writer for {self.file_path} has been released")
        if self._label_index is not None:
            parts = label_values.split(",")
            row = [key_values, *(parts[index] for index in self._label_index)]
            self._out.write(self._field_delimiter.join(row) + self._line_delimiter)
        else:
            self._buffer.append(
                key_values + self._field_delimiter + label_values + self._line_delimiter
            )
        self._pending += 1
        if self._pending >= MAX_ITEM_SIZE:
            self._flush()

    def _flush(self) -> None:
        if self._buffer:
            self._out.write("".join(self._buffer))
            self._buffer.clear()
        self._total += self._pending
        self._pending = 0

    def release(self) -> None:
        """Flush pending rows and close the file; further calls do nothing."""
        if not self._out.closed:
            self._flush()
            self._out.close()

    def __enter__(self) -> BatchWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()