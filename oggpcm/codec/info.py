"""Negotiated stream metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class StreamInfo:
    """
    Metadata established by header negotiation.

    Attributes:
        channels: Number of audio channels (0 until negotiated)
        rate: Sample rate in Hz (0 until negotiated)
        vendor: Encoder vendor string from the comment header
        comments: User comments as "KEY=value" strings, in stream order
    """
    channels: int = 0
    rate: int = 0
    vendor: str = ""
    comments: List[str] = field(default_factory=list)

    def comment_dict(self) -> Dict[str, List[str]]:
        """Comments grouped by upper-cased key. Entries without '=' are ignored."""
        grouped: Dict[str, List[str]] = {}
        for entry in self.comments:
            key, sep, value = entry.partition("=")
            if not sep:
                continue
            grouped.setdefault(key.upper(), []).append(value)
        return grouped

    def query(self, key: str, index: int = 0) -> Optional[str]:
        """Return the index-th value for key (case-insensitive), or None."""
        values = self.comment_dict().get(key.upper(), [])
        if index < len(values):
            return values[index]
        return None

    def clear(self) -> None:
        self.channels = 0
        self.rate = 0
        self.vendor = ""
        self.comments = []
