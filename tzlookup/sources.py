"""Reusable reader factories for tzlookup documents."""

from __future__ import annotations

import io
from pathlib import Path
from typing import IO, Callable, Union

from tzlookup.errors import SourceUnavailable


class ReaderSupplier:
    """
    A source of binary readers that can be used repeatedly.

    Each call to open() returns a fresh stream positioned at the start of the
    document; the caller closes it.
    """

    def __init__(self, opener: Callable[[], IO[bytes]], description: str):
        self._opener = opener
        self.description = description

    def open(self) -> IO[bytes]:
        """Raises SourceUnavailable if the reader cannot be created."""
        try:
            return self._opener()
        except OSError as e:
            raise SourceUnavailable(f"Unable to open {self.description}: {e}") from e

    def __repr__(self) -> str:
        return f"ReaderSupplier({self.description})"

    @classmethod
    def for_file(cls, path: Union[str, Path]) -> "ReaderSupplier":
        """
        Supplier over a file. The file must exist and be a regular file now;
        later disappearance surfaces as SourceUnavailable from open().
        """
        file_path = Path(path)
        if not file_path.exists():
            raise SourceUnavailable(f"{file_path} does not exist")
        if not file_path.is_file():
            raise SourceUnavailable(f"{file_path} must be a regular readable file")
        return cls(lambda: open(file_path, "rb"), str(file_path))

    @classmethod
    def for_string(cls, xml: str) -> "ReaderSupplier":
        data = xml.encode("utf-8")
        return cls(lambda: io.BytesIO(data), "<string>")
