"""Stock link filters and combinators for :func:`site_sweep.crawler.crawler.crawl`.

Every filter is a pure ``str -> bool`` function applied to raw ``href``
values before they are canonicalized.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional
from urllib.parse import urlparse

from site_sweep.crawler.models import FilterPredicate

__all__ = [
    "MEDIA_EXTENSIONS",
    "accept_all",
    "absolute_only",
    "no_media",
    "no_ftp",
    "same_domain",
    "all_of",
    "build_filter",
    "FILTER_NAMES",
]

# frozenset for O(1) membership
MEDIA_EXTENSIONS: frozenset[str] = frozenset((
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp", ".ico",
    ".pdf", ".zip", ".rar", ".7z", ".gz", ".tar",
    ".mp4", ".mp3", ".wav", ".webm", ".avi", ".mov", ".ogg",
    ".css", ".js", ".map",
    ".woff", ".woff2", ".ttf", ".eot",
))


def accept_all(url: str) -> bool:
    return True


def absolute_only(url: str) -> bool:
    """Keep only absolute http(s) links."""
    return url.lower().startswith(("http://", "https://"))


def no_media(url: str) -> bool:
    """Drop links pointing at images, archives, audio/video and static assets."""
    path = urlparse(url).path.lower()
    return not any(path.endswith(ext) for ext in MEDIA_EXTENSIONS)


def no_ftp(url: str) -> bool:
    return not url.lower().startswith("ftp:")


def same_domain(domain: str) -> FilterPredicate:
    """Build a filter accepting absolute links whose host equals *domain*."""
    host = domain.lower().split("/", 1)[0]

    def _same_domain(url: str) -> bool:
        if not absolute_only(url):
            return False
        return urlparse(url).netloc.lower() == host

    return _same_domain


def all_of(*predicates: FilterPredicate) -> FilterPredicate:
    """Conjunction of *predicates*; with no arguments every link is accepted."""
    if not predicates:
        return accept_all

    def _all_of(url: str) -> bool:
        return all(predicate(url) for predicate in predicates)

    return _all_of


_STATIC_FILTERS: dict[str, FilterPredicate] = {
    "absolute": absolute_only,
    "no-media": no_media,
    "no-ftp": no_ftp,
}
FILTER_NAMES: tuple[str, ...] = (*_STATIC_FILTERS, "same-domain")


def build_filter(names: Iterable[str], domain: Optional[str] = None) -> FilterPredicate:
    """Resolve filter *names* (as used in config files and on the CLI) into one predicate."""
    predicates: list[FilterPredicate] = []
    for name in names:
        key = name.strip().lower()
        if key == "same-domain":
            if not domain:
                raise ValueError("filter 'same-domain' needs a domain")
            predicates.append(same_domain(domain))
            continue
        factory: Optional[Callable[[str], bool]] = _STATIC_FILTERS.get(key)
        if factory is None:
            raise ValueError(
                f"Unknown filter {name!r}; expected one of: {', '.join(FILTER_NAMES)}"
            )
        predicates.append(factory)
    return all_of(*predicates)
