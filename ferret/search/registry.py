"""Catalog of named search backends.

The registry is populated once during bootstrap (see
``ferret.providers.build_registry``) and only read afterwards. A single lock
guards inserts, lookups and listings so late registration stays safe.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ferret.search.base import SearchArgs
from ferret.search.context import SearchContext
from ferret.shared.errors import (
    DuplicateProviderError,
    InvalidNameError,
    InvalidProviderError,
    ProviderNotFoundError,
)


@dataclass(frozen=True)
class Provider:
    """Immutable registry entry for one backend."""
    name: str
    title: str
    enabled: bool
    noui: bool
    searcher: Any

    def search(self, ctx: SearchContext, args: SearchArgs) -> List[Mapping[str, Any]]:
        return self.searcher.search(ctx, args)


class ProviderRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._providers: Dict[str, Provider] = {}

    def register(
        self,
        searcher: Any,
        *,
        name: Optional[str] = None,
        title: Optional[str] = None,
        enabled: Optional[bool] = None,
        noui: Optional[bool] = None,
    ) -> None:
        """Register a search backend.

        Identity defaults to the attributes the backend declares (``name``,
        ``title``, ``enabled``, ``noui``); explicit keyword arguments win.

        Raises:
            InvalidProviderError: searcher has no callable ``search``.
            InvalidNameError: the resulting name is empty.
            DuplicateProviderError: the name is already registered.
        """
        if not callable(getattr(searcher, "search", None)):
            raise InvalidProviderError("invalid provider")

        name = name if name is not None else getattr(searcher, "name", "")
        title = title if title is not None else getattr(searcher, "title", "")
        enabled = enabled if enabled is not None else getattr(searcher, "enabled", True)
        noui = noui if noui is not None else getattr(searcher, "noui", False)

        if not name:
            raise InvalidNameError("invalid provider name")
        if not title:
            title = name

        entry = Provider(
            name=name,
            title=title,
            enabled=bool(enabled),
            noui=bool(noui),
            searcher=searcher,
        )

        with self._lock:
            if name in self._providers:
                raise DuplicateProviderError(
                    f"search provider {name} is already registered",
                    metadata={"provider": name},
                )
            self._providers[name] = entry

    def providers(self) -> List[str]:
        """Sorted names of the registered providers."""
        with self._lock:
            return sorted(self._providers)

    def provider_by_name(self, name: str) -> Provider:
        with self._lock:
            entry = self._providers.get(name)
        if entry is None:
            raise ProviderNotFoundError(
                f"provider {name} couldn't be found",
                metadata={"provider": name},
            )
        return entry

    def entries(self) -> List[Provider]:
        """Registered providers in name order."""
        with self._lock:
            return [self._providers[name] for name in sorted(self._providers)]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)
