"""Commit objects, content hashing and log formatting."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable

_MASK = (1 << 64) - 1
_MUL = (0xC6A4A793 << 32) + 0x5BD1E995
_SEED = 0xC70F6907

_HEADER_PREFIXES = ("Message:", "Timestamp:", "Parent")


def _shift_mix(value: int) -> int:
    return value ^ (value >> 47)


def hash_content(content: str | bytes) -> str:
    """Return the lower-case hex digest used to name stored objects.

    The digest is a 64-bit Murmur-style hash of the content's bytes
    (text is encoded as UTF-8), written without leading zeros.
    """
    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    length = len(data)
    aligned = length & ~0x7
    digest = (_SEED ^ (length * _MUL)) & _MASK
    for start in range(0, aligned, 8):
        word = int.from_bytes(data[start:start + 8], "little")
        mixed = (_shift_mix((word * _MUL) & _MASK) * _MUL) & _MASK
        digest = ((digest ^ mixed) * _MUL) & _MASK
    if length & 0x7:
        tail = int.from_bytes(data[aligned:], "little")
        digest = ((digest ^ tail) * _MUL) & _MASK
    digest = (_shift_mix(digest) * _MUL) & _MASK
    digest = _shift_mix(digest)
    return format(digest, "x")


def current_timestamp() -> str:
    """Return the local time as ``YYYY-MM-DD HH:MM:SS``."""
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())


@dataclass
class Commit:
    """A snapshot: message, time, parent links and staged file blobs."""

    message: str
    timestamp: str = field(default_factory=current_timestamp)
    parent: str | None = None
    second_parent: str | None = None
    files: dict[str, str] = field(default_factory=dict)
    hash: str = ""

    def serialize(self) -> str:
        """Render the commit in its on-disk text form."""
        lines = [
            f"Message: {self.message}",
            f"Timestamp: {self.timestamp}",
            f"Parent: {self.parent or ''}",
        ]
        if self.second_parent is not None:
            lines.append(f"Parent2: {self.second_parent}")
        lines.extend(f"{name} {blob}" for name, blob in self.files.items())
        return "".join(line + "\n" for line in lines)

    @classmethod
    def parse(cls, commit_hash: str, text: str) -> "Commit":
        """Build a commit from its stored text, naming it ``commit_hash``."""
        message = ""
        timestamp = ""
        parent: str | None = None
        second_parent: str | None = None
        files: dict[str, str] = {}
        for line in text.splitlines():
            if line.startswith("Message:"):
                message = _header_value(line, "Message:")
            elif line.startswith("Timestamp:"):
                timestamp = _header_value(line, "Timestamp:")
            elif line.startswith("Parent2:"):
                second_parent = _header_value(line, "Parent2:") or None
            elif line.startswith("Parent:"):
                parent = _header_value(line, "Parent:") or None
            elif " " in line and not line.startswith(_HEADER_PREFIXES):
                tokens = line.split()
                if len(tokens) >= 2:
                    files[tokens[0]] = tokens[1]
        return cls(
            message=message,
            timestamp=timestamp,
            parent=parent,
            second_parent=second_parent,
            files=files,
            hash=commit_hash,
        )


def _header_value(line: str, key: str) -> str:
    value = line[len(key):]
    return value[1:] if value.startswith(" ") else value


def format_log(commits: Iterable[Commit]) -> str:
    """Format commits, newest first, as a human-readable log."""
    return "".join(
        f"Commit: {c.hash}\nMessage: {c.message}\nTime: {c.timestamp}\n\n"
        for c in commits
    )