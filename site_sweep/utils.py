"""site_sweep.utils: address helpers shared by the extractor and the crawl engine."""

from __future__ import annotations

import re
from typing import Any, Final, Sequence

from pydantic import HttpUrl, TypeAdapter, ValidationError

__all__: Sequence[str] = (
    "CANONICAL_SCHEME",
    "canonicalize_scheme",
    "seed_address",
    "is_well_formed",
)

CANONICAL_SCHEME: Final[str] = "http"

_SECURE_PREFIX = re.compile(r"^https(?=:)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s")
_HTTP_URL: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def canonicalize_scheme(url: str) -> str:
    """Rewrite a leading ``https`` scheme to ``http``; everything else is kept as-is."""
    return _SECURE_PREFIX.sub(CANONICAL_SCHEME, url, count=1)


def seed_address(domain: str) -> str:
    """Build the crawl seed by prefixing *domain* with the canonical scheme."""
    return f"{CANONICAL_SCHEME}://{domain}"


def is_well_formed(address: Any) -> bool:
    """Return True when *address* is an absolute http(s) URL with a host."""
    if not isinstance(address, str) or not address or _WHITESPACE.search(address):
        return False
    try:
        parsed = _HTTP_URL.validate_python(address)
    except ValidationError:
        return False
    return bool(parsed.host)
