import abc
from typing import Any, List, Mapping, TypedDict

from ferret.search.context import SearchContext


class SearchArgs(TypedDict):
    page: int
    keyword: str


class Searcher(abc.ABC):
    """Abstract Base Class for search backends.

    Enforces a consistent interface regardless of the upstream source
    (GitHub, an internal wiki, a simulated corpus, etc.). Identity is declared
    on the class and read once, when the backend is registered.
    """

    name: str = ""
    title: str = ""
    enabled: bool = True
    noui: bool = False

    @abc.abstractmethod
    def search(self, ctx: SearchContext, args: SearchArgs) -> List[Mapping[str, Any]]:
        """Execute a search and return raw result records.

        Args:
            ctx: Cancellable context carrying the query deadline. Implementations
                 must stop promptly once it finishes.
            args: ``{"page": int, "keyword": str}``.

        Returns:
            Ordered records exposing ``link`` and ``title`` and optionally
            ``description`` (str) and ``date`` (datetime).

        Raises:
            ProviderError: If the upstream source fails.
            ContextError: If the context finished while searching.
        """
        pass
