"""
chatstore.conversation.shapes
=============================

Structural version detection for message records.

Messages never carried a schema version, so the shape is inferred from the
fields present: a Head message has a ``fragments`` list, a V3 message has a
flat ``text`` body instead. Every entry point that can receive mixed-age
records goes through :func:`is_current_message_shape`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping


def is_current_message_shape(record: Any) -> bool:
    """True iff *record* has a ``fragments`` key holding a sequence."""
    return isinstance(record, Mapping) and isinstance(record.get("fragments"), (list, tuple))


def is_legacy_message_shape(record: Any) -> bool:
    """True for a V3 record: a ``text`` body and no fragment sequence."""
    return (
        isinstance(record, Mapping)
        and "text" in record
        and not is_current_message_shape(record)
    )


@dataclass
class ShapeCounts:
    """Tally of message shapes, for diagnostics only."""
    current: int = 0
    legacy: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        return self.current + self.legacy + self.unknown

    def add(self, other: ShapeCounts) -> None:
        self.current += other.current
        self.legacy += other.legacy
        self.unknown += other.unknown


def count_message_shapes(messages: Iterable[Any]) -> ShapeCounts:
    """
    Count Head, V3 and unrecognised records in *messages*.

    Conversion never uses these counts: each message is routed on its own,
    so a conversation mixing both ages converts correctly.
    """
    counts = ShapeCounts()
    for record in messages or ():
        if is_current_message_shape(record):
            counts.current += 1
        elif is_legacy_message_shape(record):
            counts.legacy += 1
        else:
            counts.unknown += 1
    return counts
