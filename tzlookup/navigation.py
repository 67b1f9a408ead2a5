"""
tzlookup Structural Navigation

Element-seeking primitives over a DocumentCursor. The scheme is a recursive
descent driven by a depth counter: unknown elements are skipped wholesale
(including their descendants) while truncation and tag mismatches are still
detected.

All primitives are forward-only.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from tzlookup.cursor import DocumentCursor, EventType
from tzlookup.errors import (
    MissingElement,
    MissingText,
    UnexpectedDepth,
    UnexpectedEndTag,
    UnexpectedEof,
    UnexpectedTag,
    UnexpectedTrailingContent,
)


def find_required_start_tag(cursor: DocumentCursor, name: str) -> None:
    seek_start(cursor, name, required=True)


def find_optional_start_tag(cursor: DocumentCursor, name: str) -> bool:
    """When returning False the cursor is left on the enclosing END_TAG."""
    return seek_start(cursor, name, required=False)


def seek_start(cursor: DocumentCursor, name: str, required: bool) -> bool:
    """
    Find a START_TAG named ``name`` without leaving the current level.

    More deeply nested elements and text are skipped, even START_TAGs with a
    matching name. Returns True on the START_TAG, or False (optional case) on
    the first END_TAG at the current level.

    Raises:
        MissingElement: an END_TAG was reached and the element is required
        UnexpectedEof: the document ended first
    """
    while True:
        event_type = cursor.advance()
        if event_type is EventType.END_DOCUMENT:
            break
        if event_type is EventType.START_TAG:
            current_name = cursor.name
            if current_name == name:
                return True
            # Not the element we want: skip it and everything inside it.
            cursor.advance()
            consume_through_end(cursor, current_name)
        elif event_type is EventType.END_TAG:
            if required:
                raise MissingElement(
                    f"No child element found with name {name}",
                    cursor.position_description,
                )
            return False
    raise UnexpectedEof(f"Unexpected end of document while looking for {name}")


def consume_through_end(cursor: DocumentCursor, name: str) -> None:
    """
    Consume the rest of an element and stop on its END_TAG.

    The cursor must be on the END_TAG itself, on TEXT inside the element, or
    on a START_TAG nested within the element.

    Raises:
        UnexpectedDepth: the cursor climbed above the element
        UnexpectedEndTag: an END_TAG with another name closed the element
        UnexpectedEof: the document ended first
    """
    if cursor.event_type is EventType.END_TAG and cursor.name == name:
        return

    # TEXT sits at the depth of the END_TAG we want; a START_TAG one deeper.
    required_depth = cursor.depth
    if cursor.event_type is EventType.START_TAG:
        required_depth -= 1

    while cursor.event_type is not EventType.END_DOCUMENT:
        event_type = cursor.advance()
        current_depth = cursor.depth
        if event_type is EventType.END_DOCUMENT:
            break
        if current_depth < required_depth:
            raise UnexpectedDepth(
                f"Unexpected depth while looking for end tag {name}",
                cursor.position_description,
            )
        if current_depth == required_depth and event_type is EventType.END_TAG:
            if cursor.name == name:
                return
            raise UnexpectedEndTag(
                f"Unexpected end tag while looking for end tag {name}",
                cursor.position_description,
            )
    raise UnexpectedEof(f"Unexpected end of document while looking for end tag {name}")


def read_element_text(cursor: DocumentCursor) -> str:
    """
    Read the text of the current element.

    Must be called on the START_TAG immediately preceding the text. On success
    the cursor is left on the element's END_TAG.
    """
    event_type = cursor.advance()
    if event_type is not EventType.TEXT:
        raise MissingText(
            f"Text not found, found {event_type.name}",
            cursor.position_description,
        )
    text = cursor.text or ""

    event_type = cursor.advance()
    if event_type is not EventType.END_TAG:
        raise UnexpectedTrailingContent(
            f"Unexpected nested tag or end of document when expecting text, found {event_type.name}",
            cursor.position_description,
        )
    return text


def assert_on_end(cursor: DocumentCursor, name: str) -> None:
    if not (cursor.event_type is EventType.END_TAG and cursor.name == name):
        raise UnexpectedTag(
            f"Unexpected tag encountered while expecting end tag {name}",
            cursor.position_description,
        )
