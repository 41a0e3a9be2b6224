"""Message segments and messages in the OneBot array format."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Segment:
    """One typed piece of a message, such as text, an image or a forward node."""

    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form ``{"type": ..., "data": ...}``."""
        return {"type": self.type, "data": dict(self.data)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Segment:
        """Build a segment from its wire form."""
        if not isinstance(data, Mapping):
            raise ValueError("a segment must be a mapping")
        kind = data.get("type")
        if not isinstance(kind, str):
            raise ValueError("a segment needs a string 'type'")
        payload = data.get("data", {})
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError("a segment's 'data' must be a mapping")
        return cls(kind, dict(payload))


class Message:
    """An ordered list of segments."""

    def __init__(self, segments: Iterable[Segment] = ()) -> None:
        self._segments: list[Segment] = list(segments)

    @classmethod
    def from_text(cls, text: str) -> Message:
        """Build a message holding a single text segment."""
        return cls([Segment("text", {"text": text})])

    def push(self, segment: Segment) -> None:
        """Append one segment."""
        self._segments.append(segment)

    def extend(self, segments: Iterable[Segment]) -> None:
        """Append several segments in order."""
        self._segments.extend(segments)

    def text(self) -> str | None:
        """Join the text of all text segments, or None when there are none."""
        parts = [
            str(seg.data.get("text", ""))
            for seg in self._segments
            if seg.type == "text"
        ]
        return "".join(parts) if parts else None

    def to_list(self) -> list[dict[str, Any]]:
        """Return the wire form: a list of segment dicts."""
        return [seg.to_dict() for seg in self._segments]

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index: int) -> Segment:
        return self._segments[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self._segments == other._segments

    def __repr__(self) -> str:
        return f"Message({self._segments!r})"