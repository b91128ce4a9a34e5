# =============================================================================
# File: simple_cache.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

from collections import OrderedDict
from threading import Lock
from typing import Any, Callable, List, Optional


class SimpleCache:
    """Bounded LRU of loaded models keyed by alias."""

    def __init__(self, max_size: int = 3, on_evict: Optional[Callable[[str, Any], None]] = None):
        self.max_size = max_size
        self.cache: "OrderedDict[str, Any]" = OrderedDict()
        self.lock = Lock()
        self._on_evict = on_evict

    def get(self, key: str) -> Optional[Any]:
        with self.lock:
            if key not in self.cache:
                return None
            self.cache.move_to_end(key)
            return self.cache[key]

    def put(self, key: str, value: Any) -> None:
        evicted = None
        with self.lock:
            if key in self.cache:
                self.cache.move_to_end(key)
                self.cache[key] = value
            else:
                if len(self.cache) >= self.max_size:
                    evicted = self.cache.popitem(last=False)
                self.cache[key] = value
        if evicted is not None and self._on_evict is not None:
            self._on_evict(*evicted)

    def keys(self) -> List[str]:
        with self.lock:
            return list(self.cache.keys())

    def size(self) -> int:
        return len(self.cache)

    def clear(self) -> None:
        with self.lock:
            self.cache.clear()
