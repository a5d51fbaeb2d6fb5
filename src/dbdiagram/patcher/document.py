"""Documents a splice can be committed to.

The patcher only needs four operations from its host: read the current
text, replace a range, insert at an offset, and say whether writes are
allowed right now. TextDocument is an in-memory buffer; FileDocument
writes through to disk atomically.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Protocol

from dbdiagram.core.errors import PatchError


class Document(Protocol):
    def read_text(self) -> str: ...

    def replace_range(self, start: int, end: int, text: str) -> None: ...

    def insert_at(self, offset: int, text: str) -> None: ...

    def is_writable(self) -> bool: ...


def _check_range(source: str, start: int, end: int) -> None:
    if not 0 <= start <= end <= len(source):
        raise PatchError.invalid_edit(
            "range out of bounds", start=start, end=end, length=len(source)
        )


class TextDocument:
    """In-memory document."""

    def __init__(self, text: str = "", *, writable: bool = True) -> None:
        self._text = text
        self.writable = writable
        self.revision = 0

    def read_text(self) -> str:
        return self._text

    def replace_range(self, start: int, end: int, text: str) -> None:
        if not self.writable:
            raise PatchError.not_writable()
        _check_range(self._text, start, end)
        self._text = self._text[:start] + text + self._text[end:]
        self.revision += 1

    def insert_at(self, offset: int, text: str) -> None:
        self.replace_range(offset, offset, text)

    def is_writable(self) -> bool:
        return self.writable


class FileDocument:
    """A UTF-8 file on disk.

    Every write re-reads the file, splices, and replaces it atomically via
    a temporary file in the same directory.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read_text(self) -> str:
        with self.path.open(encoding="utf-8", newline="") as handle:
            return handle.read()

    def is_writable(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.W_OK)

    def replace_range(self, start: int, end: int, text: str) -> None:
        if not self.is_writable():
            raise PatchError.not_writable(f"{self.path} is missing or read-only")
        source = self.read_text()
        _check_range(source, start, end)
        self._write(source[:start] + text + source[end:])

    def insert_at(self, offset: int, text: str) -> None:
        self.replace_range(offset, offset, text)

    def _write(self, content: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
            shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
