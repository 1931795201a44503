"""Token extraction from template text, with an mtime-keyed file cache."""

from __future__ import annotations

import logging
import os
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from ..core.errors import TemplateNotFoundError
from ..core.models import CacheStats

logger = logging.getLogger(__name__)

# Marker syntax lives here and nowhere else.
TOKEN_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def substitute_markers(text: str, replacement: Callable[[str], str | None]) -> str:
    """Rewrite every marker in one pass.

    ``replacement`` receives the stripped token name and returns the text to
    insert, or None to leave that marker as written. Inserted text is never
    scanned again, so values that contain markers come out verbatim.
    """

    def _sub(match: re.Match[str]) -> str:
        value = replacement(match.group(1).strip())
        return match.group(0) if value is None else value

    return TOKEN_PATTERN.sub(_sub, text)


def extract_tokens(text: str) -> list[str]:
    """Extract unique token names from template text.

    Args:
        text: Raw template content

    Returns:
        Sorted list of unique, whitespace-stripped token names
    """
    tokens = {match.strip() for match in TOKEN_PATTERN.findall(text)}
    tokens.discard("")
    return sorted(tokens)


@dataclass(frozen=True)
class CacheEntry:
    tokens: tuple[str, ...]
    mtime_ns: int


class TokenCache:
    """Per-path token cache keyed by absolute path.

    Work on a single path is serialized through a per-path lock so the
    stat/read/store sequence cannot interleave; distinct paths proceed
    independently.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._path_locks: dict[str, threading.Lock] = {}

    def path_lock(self, key: str) -> threading.Lock:
        with self._lock:
            return self._path_locks.setdefault(key, threading.Lock())

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry

    def discard(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self, key: str | None = None) -> None:
        # Locks held by an in-flight extraction stay; the rest are dropped.
        with self._lock:
            if key is None:
                self._entries.clear()
                self._path_locks = {
                    k: lock for k, lock in self._path_locks.items() if lock.locked()
                }
            else:
                self._entries.pop(key, None)
                lock = self._path_locks.get(key)
                if lock is not None and not lock.locked():
                    del self._path_locks[key]

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._entries), files=list(self._entries))


def _cache_key(path: str | Path) -> str:
    return str(Path(path).resolve())


class TokenExtractor:
    """Extracts tokens from text and template files.

    Each extractor owns its cache unless one is passed in, so separate
    instances never see each other's entries.
    """

    def __init__(self, cache: TokenCache | None = None) -> None:
        self.cache = cache if cache is not None else TokenCache()

    def extract(self, text: str) -> list[str]:
        return extract_tokens(text)

    def extract_cached(self, template_path: str | Path) -> list[str]:
        """Extract tokens from a file, reusing the cached list while its mtime is unchanged.

        Args:
            template_path: Path to the template file

        Returns:
            Sorted list of unique token names

        Raises:
            TemplateNotFoundError: If the file does not exist
        """
        key = _cache_key(template_path)

        with self.cache.path_lock(key):
            try:
                mtime_ns = os.stat(key).st_mtime_ns
            except FileNotFoundError:
                self.cache.discard(key)
                raise TemplateNotFoundError(template_path) from None

            cached = self.cache.get(key)
            if cached is not None and cached.mtime_ns == mtime_ns:
                logger.debug(f"Token cache hit: {key}")
                return list(cached.tokens)

            logger.debug(f"Token cache miss: {key}")
            try:
                content = Path(key).read_text(encoding="utf-8")
            except FileNotFoundError:
                self.cache.discard(key)
                raise TemplateNotFoundError(template_path) from None

            tokens = extract_tokens(content)
            self.cache.put(key, CacheEntry(tokens=tuple(tokens), mtime_ns=mtime_ns))
            return tokens

    def extract_from_many(
        self, template_paths: Iterable[str | Path]
    ) -> dict[str, list[str] | dict[str, str]]:
        """Extract tokens from several files, isolating per-file failures.

        Returns:
            Mapping of path to its token list, or to ``{"error": message}``
        """
        results: dict[str, list[str] | dict[str, str]] = {}
        for template_path in template_paths:
            try:
                results[str(template_path)] = self.extract_cached(template_path)
            except (OSError, UnicodeDecodeError) as exc:
                results[str(template_path)] = {"error": str(exc)}
        return results

    def all_unique_tokens(self, template_paths: Iterable[str | Path]) -> list[str]:
        """Union of tokens across files; unreadable files are skipped with a warning."""
        all_tokens: set[str] = set()
        for template_path in template_paths:
            try:
                all_tokens.update(self.extract_cached(template_path))
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(f"Could not extract tokens from {template_path}: {exc}")
        return sorted(all_tokens)

    def clear_cache(self, template_path: str | Path | None = None) -> None:
        self.cache.clear(_cache_key(template_path) if template_path is not None else None)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()
