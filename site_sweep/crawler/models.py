"""
Data models and error types for the SiteSweep crawl engine.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

OK_STATUS = 200

FilterPredicate = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class PageResult:
    """Fetch outcome for one address: HTTP status and raw body."""

    url: str
    status: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return self.status == OK_STATUS


@dataclass(frozen=True, slots=True)
class LevelReport:
    """Counters describing one finished crawl level."""

    level: int
    fetched: int
    discovered: int
    new: int
    visited: int


class InvalidAddressError(ValueError):
    """The seed domain does not form a well-formed address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid url: {address}")
        self.address = address


class FetchError(RuntimeError):
    """A page could not be fetched because of a transport failure."""

    def __init__(self, address: str, reason: object = None) -> None:
        message = f"Failed to fetch {address}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.address = address


@runtime_checkable
class PageFetcher(Protocol):
    """Anything able to turn an address into a :class:`PageResult`."""

    async def fetch(self, address: str) -> PageResult: ...
