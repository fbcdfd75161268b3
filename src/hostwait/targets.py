"""Parsing of ``host:port`` target lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Target:
    """A single TCP endpoint to wait for."""

    host: str
    port: str

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.address


class TargetFormatError(ValueError):
    """Raised when a ``host:port`` pair cannot be parsed."""

    def __init__(self, pair: str):
        super().__init__(f"Invalid format for host:port: {pair!r}")
        self.pair = pair


def parse_target(pair: str) -> Target:
    parts = [part.strip() for part in pair.strip().split(":")]
    if len(parts) != 2 or not all(parts):
        raise TargetFormatError(pair)
    host, port = parts
    # Service names pass through; numeric ports must be in range or the
    # resolver wraps them onto an unrelated port.
    if port.isascii() and port.isdigit() and not 0 < int(port) <= 65535:
        raise TargetFormatError(pair)
    return Target(host=host, port=port)


def parse_targets(text: str) -> List[Target]:
    """Parse a comma-separated list of ``host:port`` pairs.

    Order is preserved and duplicates are kept; the waiter collapses them.
    The first malformed pair aborts parsing with :class:`TargetFormatError`,
    so callers never see a partial list.
    """

    return [parse_target(pair) for pair in text.split(",")]
