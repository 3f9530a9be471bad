"""
Shared (port, protocol) key instances.
"""

import threading
from typing import Dict

from .models import CompositeKey


class KeyInterner:
    """
    Hands out one shared CompositeKey per distinct (port, protocol) pair.

    The lookup table and the classifier both go through the same interner,
    so a pair seen in millions of flow records maps to a single object and
    a single bucket in each count table. Safe for concurrent use.

    Example:
        >>> interner = KeyInterner()
        >>> interner.intern(80, "tcp") is interner.intern(80, "tcp")
        True
    """

    def __init__(self):
        self._pool: Dict[str, CompositeKey] = {}
        self._lock = threading.Lock()

    def intern(self, port: int, protocol: str) -> CompositeKey:
        """
        Get the shared key for a port/protocol pair.

        Args:
            port: Destination port number
            protocol: Lowercase protocol keyword

        Returns:
            The CompositeKey instance shared by all equal pairs
        """
        canonical = f"{port}|{protocol}"
        key = self._pool.get(canonical)
        if key is not None:
            return key

        with self._lock:
            key = self._pool.get(canonical)
            if key is None:
                key = CompositeKey(port, protocol)
                self._pool[canonical] = key
            return key

    def clear(self):
        """Drop every pooled key"""
        with self._lock:
            self._pool.clear()

    def __len__(self) -> int:
        return len(self._pool)

    def __contains__(self, canonical: str) -> bool:
        return canonical in self._pool
