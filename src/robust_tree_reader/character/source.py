"""Listing source acquisition with scoped handle lifetime.

A :class:`ListingSource` turns any supported input (listing text, raw bytes, a
path, or an open file object) into decoded text. Handles the source opens itself
are released on every exit path, including fatal scanning errors raised while
the source is still in scope.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, List, Optional, TextIO, Type, Union

from robust_tree_reader.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    SourceConfig,
    SourceNotFoundError,
    SourceTooLargeError,
    get_logger,
)

InputType = Union[str, bytes, Path, BinaryIO, TextIO]


@dataclass
class SourceText:
    """Decoded listing text with the metadata of how it was obtained.

    Attributes:
        text: Decoded listing
        origin: Where the text came from ("string", "bytes", "file" or a path)
        encoding: Encoding used to decode, or None for text input
        byte_count: Size of the raw input in bytes, 0 for text input
        diagnostics: Notes produced while decoding
    """

    text: str
    origin: str
    encoding: Optional[str] = None
    byte_count: int = 0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class ListingSource:
    """Context manager that loads and decodes a listing.

    Examples:
        >>> with ListingSource(Path("ast.txt")) as source:
        ...     text = source.read().text
    """

    def __init__(
        self,
        input_data: InputType,
        config: Optional[SourceConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.input_data = input_data
        self.config = config or SourceConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "listing_source")
        self._handle: Optional[BinaryIO] = None
        self._owns_handle = False
        self._result: Optional[SourceText] = None

    def __enter__(self) -> "ListingSource":
        if isinstance(self.input_data, Path):
            self._open_path(self.input_data)
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        """Whether the source no longer holds an open handle of its own."""
        return self._handle is None

    def close(self) -> None:
        """Release the handle opened by this source, if any."""
        if self._handle is not None and self._owns_handle:
            self._handle.close()
            self.logger.debug("Released listing handle")
        self._handle = None
        self._owns_handle = False

    def _open_path(self, path: Path) -> None:
        if not path.exists():
            raise SourceNotFoundError(str(path))
        if path.is_dir():
            raise SourceNotFoundError(str(path), "is a directory")
        try:
            self._handle = path.open("rb")
        except OSError as e:
            raise SourceNotFoundError(str(path), e.strerror or str(e)) from e
        self._owns_handle = True

    def read(self) -> SourceText:
        """Read the whole listing once and return its decoded text."""
        if self._result is not None:
            return self._result

        data = self.input_data
        if isinstance(data, str):
            self._result = self._accept_text(data, "string")
        elif isinstance(data, bytes):
            self._result = self._decode(data, "bytes")
        elif isinstance(data, Path):
            if self._handle is None:
                # Used without ``with``: open now, close right after reading.
                self._open_path(data)
                try:
                    raw = self._handle.read()
                finally:
                    self.close()
            else:
                raw = self._handle.read()
            self._result = self._decode(raw, str(data))
        elif hasattr(data, "read"):
            content = data.read()
            if isinstance(content, bytes):
                self._result = self._decode(content, "file")
            elif isinstance(content, str):
                self._result = self._accept_text(content, "file")
            else:
                raise TypeError(
                    f"File object returned {type(content).__name__}, "
                    "expected str or bytes"
                )
        else:
            raise TypeError(f"Unsupported listing input type: {type(data).__name__}")

        self.logger.debug(
            "Listing loaded",
            extra={
                "origin": self._result.origin,
                "encoding": self._result.encoding,
                "char_count": len(self._result.text),
            }
        )
        return self._result

    def _check_size(self, size: int) -> None:
        limit = self.config.max_input_size_bytes
        if limit is not None and size > limit:
            raise SourceTooLargeError(size, limit)

    def _accept_text(self, text: str, origin: str) -> SourceText:
        # Text is measured in its UTF-8 form
        if self.config.max_input_size_bytes is not None:
            self._check_size(len(text.encode("utf-8")))
        return SourceText(text=text, origin=origin)

    def _decode(self, raw: bytes, origin: str) -> SourceText:
        self._check_size(len(raw))

        diagnostics: List[DiagnosticEntry] = []
        try:
            text = raw.decode(self.config.encoding)
            encoding = self.config.encoding
        except UnicodeDecodeError as e:
            encoding = self.config.fallback_encoding
            text = raw.decode(encoding, errors="replace")
            diagnostics.append(DiagnosticEntry(
                severity=DiagnosticSeverity.INFO,
                message=(
                    f"Listing is not valid {self.config.encoding}, "
                    f"decoded as {encoding}"
                ),
                component="listing_source",
                details={"offset": e.start, "reason": e.reason},
                correlation_id=self.correlation_id,
            ))
            self.logger.info(
                "Falling back to secondary encoding",
                extra={"encoding": encoding, "offset": e.start}
            )

        return SourceText(
            text=text,
            origin=origin,
            encoding=encoding,
            byte_count=len(raw),
            diagnostics=diagnostics,
        )
