"""
tzlookup Document Cursor

Forward-only pull cursor over an lxml feed parser. The cursor presents the
document as a flat stream of structural events with pull-parser depth
accounting:

    START_TAG       depth of the element (root = 1)
    TEXT            depth of the enclosing element
    END_TAG         same depth as the matching START_TAG
    END_DOCUMENT    0

lxml only reports element start/end events, so character data is recovered
from the partially built tree: an element's ``text`` is complete once the next
start/end event has been produced, and the same holds for a closed element's
``tail``. Once its tail has been read an element is cleared and its earlier
siblings are detached, so the partial tree holds at most two children per
open element and memory is bounded by nesting depth rather than document size.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Any, Deque, Dict, Optional, Tuple

from lxml import etree

from tzlookup.errors import MalformedDocument, SourceUnavailable

DEFAULT_CHUNK_SIZE = 16 * 1024


class EventType(Enum):
    """Structural event kinds."""
    START_DOCUMENT = "start_document"
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    TEXT = "text"
    END_DOCUMENT = "end_document"


@dataclass(frozen=True)
class Event:
    """A single structural event."""
    type: EventType
    depth: int
    name: Optional[str] = None
    text: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    line: Optional[int] = None


_START_DOCUMENT = Event(EventType.START_DOCUMENT, 0)
_END_DOCUMENT = Event(EventType.END_DOCUMENT, 0)


def _new_parser() -> etree.XMLPullParser:
    return etree.XMLPullParser(
        events=("start", "end"),
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


class DocumentCursor:
    """
    Pull cursor over a binary (or text) stream.

    The cursor does not own the stream; whoever opened it closes it.
    """

    def __init__(self, stream: IO[Any], chunk_size: int = DEFAULT_CHUNK_SIZE):
        self._stream = stream
        self._chunk_size = chunk_size
        self._parser = _new_parser()
        self._pending: Deque[Event] = deque()
        self._current = _START_DOCUMENT
        self._depth = 0
        self._fed_all = False
        # (element, "text" | "tail") whose character data is still being parsed
        self._text_owner: Optional[Tuple[Any, str]] = None

    # ─── accessors ───────────────────────────────────────────────────────

    @property
    def event_type(self) -> EventType:
        return self._current.type

    @property
    def name(self) -> Optional[str]:
        return self._current.name

    @property
    def text(self) -> Optional[str]:
        return self._current.text

    @property
    def depth(self) -> int:
        return self._current.depth

    def attribute(self, name: str) -> Optional[str]:
        """Return an attribute of the current start tag, or None."""
        return self._current.attributes.get(name)

    @property
    def position_description(self) -> str:
        event = self._current
        parts = [event.type.name]
        if event.type is EventType.START_TAG:
            attrs = "".join(f' {k}="{v}"' for k, v in event.attributes.items())
            parts.append(f"<{event.name}{attrs}>")
        elif event.type is EventType.END_TAG:
            parts.append(f"</{event.name}>")
        elif event.type is EventType.TEXT:
            parts.append(repr(event.text))
        if event.line is not None:
            parts.append(f"@line {event.line}")
        return " ".join(parts)

    # ─── movement ────────────────────────────────────────────────────────

    def advance(self) -> EventType:
        """
        Move to the next event and return its type.

        Raises:
            MalformedDocument: the tokenizer rejected the input
            SourceUnavailable: the stream could not be read
        """
        if self._current.type is EventType.END_DOCUMENT:
            return EventType.END_DOCUMENT
        while not self._pending:
            self._fill()
        self._current = self._pending.popleft()
        return self._current.type

    def _fill(self) -> None:
        if self._fed_all:
            self._pending.append(_END_DOCUMENT)
            return

        try:
            chunk = self._stream.read(self._chunk_size)
        except OSError as e:
            raise SourceUnavailable(f"Unable to read document: {e}") from e

        try:
            if chunk:
                if isinstance(chunk, str):
                    chunk = chunk.encode("utf-8")
                self._parser.feed(chunk)
            else:
                self._fed_all = True
                self._parser.close()
            for action, element in self._parser.read_events():
                self._translate(action, element)
        except etree.XMLSyntaxError as e:
            raise MalformedDocument(f"Malformed document: {e}") from e

        if self._fed_all:
            self._flush_text()

    def _translate(self, action: str, element: Any) -> None:
        self._flush_text()
        if action == "start":
            self._depth += 1
            self._pending.append(Event(
                EventType.START_TAG,
                self._depth,
                name=element.tag,
                attributes=dict(element.attrib),
                line=element.sourceline,
            ))
            self._text_owner = (element, "text")
        else:
            self._pending.append(Event(
                EventType.END_TAG,
                self._depth,
                name=element.tag,
                line=element.sourceline,
            ))
            self._depth -= 1
            self._text_owner = (element, "tail")

    def _flush_text(self) -> None:
        if self._text_owner is None:
            return
        element, slot = self._text_owner
        self._text_owner = None
        value = element.text if slot == "text" else element.tail
        if value:
            self._pending.append(Event(EventType.TEXT, self._depth, text=value))
        if slot == "tail":
            element.clear()
            while element.getprevious() is not None:
                del element.getparent()[0]
