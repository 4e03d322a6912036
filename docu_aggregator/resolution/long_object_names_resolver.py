"""
Short, file system safe keys for object names.

Object names are arbitrary user data ("Order #123/4", very long search
queries, ...) but they end up as file names of the object index. The
resolver maps every name to a key that is safe to use as a file name and
keeps the mapping so that keys can be turned back into display names.
"""

import re
from typing import Dict, Optional

from docu_aggregator.domain.constants import MAX_SHORT_NAME_LENGTH, RESERVED_SHORT_NAMES

_UNSAFE_CHARS_RE = re.compile(r'[^\w\-.]')


class LongObjectNamesResolver:
    """
    Resolves object names to short keys.

    Resolution is deterministic for the lifetime of one resolver: the same
    name always yields the same key. Two different names never share a key;
    when their sanitized forms collide, later names get a counter suffix
    (``_2``, ``_3``, ...). Keys are compared case-insensitively so that
    they stay distinct on case-insensitive file systems.

    Args:
        max_length: Maximum length of the sanitized part of a key.
    """

    def __init__(self, max_length: int = MAX_SHORT_NAME_LENGTH) -> None:
        self._max_length = max_length
        self._long_to_short: Dict[str, str] = {}
        self._short_to_long: Dict[str, str] = {}
        self._used_keys: set[str] = set(RESERVED_SHORT_NAMES)

    def resolve(self, long_name: str) -> str:
        """
        Resolve a name to its short key, allocating a new key on first use.

        Args:
            long_name: Object name of any length and content.

        Returns:
            File system safe key unique to ``long_name``.
        """
        short_name = self._long_to_short.get(long_name)
        if short_name is not None:
            return short_name

        base = self._sanitize(long_name)
        short_name = base
        if short_name.lower() in self._used_keys:
            counter = 2
            while f"{base}_{counter}".lower() in self._used_keys:
                counter += 1
            short_name = f"{base}_{counter}"

        self._register(long_name, short_name)
        return short_name

    def resolve_long_name(self, short_name: str) -> Optional[str]:
        """Return the name a key was allocated for, or None if unknown."""
        return self._short_to_long.get(short_name)

    def to_index(self) -> Dict[str, str]:
        """The persisted form: short key → long name, ordered by key."""
        return dict(sorted(self._short_to_long.items()))

    @classmethod
    def from_index(cls, index: Dict[str, str], max_length: int = MAX_SHORT_NAME_LENGTH) -> 'LongObjectNamesResolver':
        """Rebuild a resolver from a persisted index."""
        resolver = cls(max_length=max_length)
        for short_name, long_name in index.items():
            resolver._register(long_name, short_name)
        return resolver

    def __len__(self) -> int:
        return len(self._long_to_short)

    def _register(self, long_name: str, short_name: str) -> None:
        self._long_to_short[long_name] = short_name
        self._short_to_long[short_name] = long_name
        self._used_keys.add(short_name.lower())

    def _sanitize(self, name: str) -> str:
        sanitized = _UNSAFE_CHARS_RE.sub('_', name)[:self._max_length]
        # Leading dots would produce hidden files or '.'/'..'
        sanitized = sanitized.lstrip('.')
        return sanitized or '_'
