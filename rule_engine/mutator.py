"""
Criteria Mutator.

Named transforms applied to criteria before evaluation. A mutation named
"user.country" runs whenever that path resolves in a criteria object and
replaces the value with whatever the transform returns.

Key Features:
- Transforms are plain callables or coroutine functions: fn(value, criteria)
- Criteria are deep-copied first; the caller's object is never changed
- Results cached per (mutation name, sha256 of the input value)
- Identical mutations already running are awaited, not started twice
- Arrays of criteria are mutated concurrently with asyncio.gather

Usage:
    mutator = Mutator()
    mutator.add("country", lambda value, criteria: value.upper())
    mutated = await mutator.mutate({"country": "gb"})   # {"country": "GB"}
"""

from __future__ import annotations

import asyncio
import copy
import hashlib
import inspect
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .discovery import MISSING, resolve_property, update_property
from .utils.logger import get_logger

MutationFn = Callable[[Any, Any], Any]
CacheKey = Tuple[str, str]


def cache_key(name: str, value: Any) -> CacheKey:
    """Cache key for one mutation input."""
    return name, hashlib.sha256(str(value).encode("utf-8")).hexdigest()


class Mutator:
    """
    Registry and runner of criteria mutations.

    Attributes:
        cache_enabled: Keep results between calls (in-flight de-duplication
            happens either way)
    """

    def __init__(self, cache_enabled: Optional[bool] = None):
        if cache_enabled is None:
            from .config import get_config
            cache_enabled = get_config().engine.mutation_cache
        self.cache_enabled = cache_enabled
        self._mutations: Dict[str, MutationFn] = {}
        self._cache: Dict[CacheKey, Any] = {}
        self._pending: Dict[CacheKey, "asyncio.Future[Any]"] = {}
        self._log = get_logger().component("mutator")

    # =========================================================================
    # Registration
    # =========================================================================

    def add(
        self,
        name: Union[str, Iterable[Any]],
        mutation: Optional[MutationFn] = None,
    ) -> None:
        """
        Register one mutation, or several.

        Args:
            name: Field path, or an iterable of (name, fn) pairs or
                {"name": ..., "mutation": ...} mappings
            mutation: Transform for a single name
        """
        if isinstance(name, str):
            if not callable(mutation):
                raise TypeError(f"Mutation for '{name}' must be callable")
            self._mutations[name] = mutation
            return

        for entry in name:
            if isinstance(entry, Mapping):
                self.add(entry["name"], entry["mutation"])
            else:
                entry_name, entry_fn = entry
                self.add(entry_name, entry_fn)

    def remove(self, names: Union[str, Iterable[str]]) -> None:
        """Unregister mutations and purge their cached results."""
        if isinstance(names, str):
            names = [names]
        for name in names:
            self.clear_cache(name)
            self._mutations.pop(name, None)

    def remove_all(self) -> None:
        self._mutations.clear()
        self._cache.clear()

    def clear_cache(self, name: Optional[str] = None) -> None:
        """Drop cached results, for every mutation or just one."""
        if name is None:
            self._cache.clear()
            return
        for key in [k for k in self._cache if k[0] == name]:
            del self._cache[key]

    @property
    def names(self) -> List[str]:
        return list(self._mutations)

    def __len__(self) -> int:
        return len(self._mutations)

    def __contains__(self, name: object) -> bool:
        return name in self._mutations

    # =========================================================================
    # Mutation
    # =========================================================================

    async def mutate(self, criteria: Any) -> Any:
        """
        Mutated copy of criteria (or of each item of a criteria list).

        Criteria with nothing to mutate are returned as is.
        """
        if isinstance(criteria, (list, tuple)):
            return list(await asyncio.gather(*(self._mutate_one(item) for item in criteria)))
        return await self._mutate_one(criteria)

    def has_mutations(self, criteria: Any) -> bool:
        return any(resolve_property(name, criteria) is not MISSING for name in self._mutations)

    async def _mutate_one(self, criteria: Any) -> Any:
        if not self._mutations or not isinstance(criteria, Mapping):
            return criteria
        if not self.has_mutations(criteria):
            return criteria

        mutated = copy.deepcopy(criteria)
        await asyncio.gather(*(self._apply(name, mutated) for name in list(self._mutations)))
        return mutated

    async def _apply(self, name: str, criteria: Any) -> None:
        value = resolve_property(name, criteria)
        if value is MISSING:
            return
        result = await self._execute(name, value, criteria)
        update_property(name, criteria, result)

    async def _execute(self, name: str, value: Any, criteria: Any) -> Any:
        key = cache_key(name, value)

        if key in self._cache:
            self._log.debug("Cache hit on '%s' with param %r", name, value)
            return self._cache[key]

        pending = self._pending.get(key)
        if pending is not None:
            self._log.debug("Waiting on mutation '%s' with param %r", name, value)
            return await pending

        self._log.debug("Running mutation '%s' with param %r", name, value)
        task = asyncio.ensure_future(self._run(self._mutations[name], value, criteria))
        self._pending[key] = task
        try:
            result = await task
        finally:
            self._pending.pop(key, None)

        if self.cache_enabled and name in self._mutations:
            self._cache[key] = result
        return result

    @staticmethod
    async def _run(mutation: MutationFn, value: Any, criteria: Any) -> Any:
        result = mutation(value, criteria)
        if inspect.isawaitable(result):
            result = await result
        return result
