"""Lazy extraction of attribute values from repeating XML elements."""

import codecs
import re
from collections import deque
from collections.abc import Iterable
from xml.etree.ElementTree import ParseError, XMLParser

from fred_api.exceptions import (
    EmptyAttributeError,
    FieldDecodeError,
    FieldExtractionError,
    MalformedMarkupError,
    MissingAttributeError,
)


CHUNK_SIZE = 16 * 1024

_XML_DECLARATION = re.compile(rb"^(?:\xef\xbb\xbf)?\s*<\?xml\b[^>]*\?>")
_DECLARED_ENCODING = re.compile(rb"""encoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']""")

# Stands in for one undecodable byte sequence; private use, so valid XML text
UNDECODABLE = "\ue000"

# Wraps the body so that sibling top-level elements and bare text parse
_DOCUMENT_TAG = "fred-api-document"


class _TagTarget:
    """
    Parser target that keeps the attributes of matching start tags.

    Placeholders are counted in document order so that each one can be traced
    back to the decoding error it replaced.
    """

    def __init__(self, tag: str) -> None:
        self.tag = tag
        self.matches: deque[tuple[dict[str, str], int]] = deque()
        self.undecodable_seen = 0

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        if tag == self.tag:
            self.matches.append((attrib, self.undecodable_seen))
        for value in attrib.values():
            self.undecodable_seen += value.count(UNDECODABLE)

    def data(self, text: str) -> None:
        self.undecodable_seen += text.count(UNDECODABLE)

    def comment(self, text: str) -> None:
        self.undecodable_seen += text.count(UNDECODABLE)

    def pi(self, target: str, text: str | None = None) -> None:
        self.undecodable_seen += (text or "").count(UNDECODABLE)

    def close(self) -> None:
        return None


class FieldIter:
    """
    Iterate over the requested attributes of every ``tag`` element in ``data``.

    Each item is a list of attribute values in the order of ``fields``:

        >>> rows = FieldIter("observation", ["date", "value"], body)
        >>> next(rows)
        ['1971-04-01', '0.850603488248666']

    The input is decoded and parsed incrementally; no element tree is built.
    Bytes that cannot be decoded only matter when they fall inside a
    requested attribute of a matching element; elsewhere they are ignored.
    The first missing, empty or undecodable requested attribute, or the first
    markup error, is raised from ``__next__`` and the iterator is then
    exhausted. Later elements are never scanned, even if they are well formed.

    Not safe to share between threads.
    """

    def __init__(self, tag: str, fields: Iterable[str], data: bytes) -> None:
        self.tag = tag
        self.fields = list(fields)
        self._data = bytes(data)
        self._pos = 0
        self._target = _TagTarget(tag)
        self._parser: XMLParser | None = None
        self._decoder: codecs.IncrementalDecoder | None = None
        self._encoding = "utf-8"
        self._decode_errors: list[UnicodeDecodeError] = []
        self._pending_error: FieldExtractionError | None = None
        self._input_done = False
        self._halted = False

    def __iter__(self) -> "FieldIter":
        return self

    def __next__(self) -> list[str]:
        if self._halted:
            raise StopIteration
        while not self._target.matches:
            if self._pending_error is not None:
                self._halted = True
                raise self._pending_error
            if self._input_done:
                self._halted = True
                raise StopIteration
            self._read_chunk()

        attrib, undecodable_before = self._target.matches.popleft()
        try:
            return self._row(attrib, undecodable_before)
        except FieldExtractionError:
            self._halted = True
            raise

    def _row(self, attrib: dict[str, str], undecodable_before: int) -> list[str]:
        row = []
        for field in self.fields:
            value = attrib.get(field)
            if value is None:
                raise MissingAttributeError(field, self.tag)
            if self._decode_errors and UNDECODABLE in value:
                raise FieldDecodeError(field, self._cause(attrib, field, undecodable_before))
            if not value:
                raise EmptyAttributeError(field, self.tag)
            row.append(value)
        return row

    def _cause(
        self, attrib: dict[str, str], field: str, undecodable_before: int
    ) -> UnicodeDecodeError:
        """The decoding error behind the first placeholder in ``attrib[field]``."""
        index = undecodable_before
        for name, value in attrib.items():
            if name == field:
                break
            index += value.count(UNDECODABLE)
        # U+E000 present in the source itself shifts the count
        return self._decode_errors[min(index, len(self._decode_errors) - 1)]

    def _start(self) -> None:
        """Read the XML declaration and set up the decoder and parser."""
        declaration = _XML_DECLARATION.match(self._data)
        if declaration:
            self._pos = declaration.end()
            declared = _DECLARED_ENCODING.search(declaration.group())
            if declared:
                self._encoding = declared.group(1).decode("ascii")
        elif self._data.startswith(codecs.BOM_UTF8):
            self._pos = len(codecs.BOM_UTF8)

        try:
            self._decoder = codecs.getincrementaldecoder(self._encoding)(errors="strict")
        except LookupError as e:
            self._fail(MalformedMarkupError(e))
            return

        self._parser = XMLParser(target=self._target)
        self._feed(f"<{_DOCUMENT_TAG}>")

    def _read_chunk(self) -> None:
        if self._parser is None:
            self._start()
            if self._pending_error is not None:
                return

        chunk = self._data[self._pos:self._pos + CHUNK_SIZE]
        self._pos += len(chunk)
        final = self._pos >= len(self._data)

        self._feed(self._decode(chunk, final))
        if final:
            self._feed(f"</{_DOCUMENT_TAG}>")
            if self._pending_error is None:
                try:
                    self._parser.close()
                except ParseError as e:
                    self._fail(MalformedMarkupError(e))
            self._input_done = True

    def _decode(self, chunk: bytes, final: bool) -> str:
        """Decode a chunk, replacing each undecodable sequence with one placeholder."""
        parts = []
        while True:
            try:
                parts.append(self._decoder.decode(chunk, final))
                return "".join(parts)
            except UnicodeDecodeError as e:
                parts.append(e.object[:e.start].decode(self._encoding, errors="ignore"))
                parts.append(UNDECODABLE)
                self._decode_errors.append(e)
                self._decoder.reset()
                chunk = e.object[e.end:]

    def _feed(self, text: str) -> None:
        if not text or self._pending_error is not None:
            return
        try:
            self._parser.feed(text)
        except ParseError as e:
            self._fail(MalformedMarkupError(e))

    def _fail(self, error: FieldExtractionError) -> None:
        if self._pending_error is None:
            self._pending_error = error
