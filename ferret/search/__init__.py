from .schema import Query, QueryState, Result
from .context import SearchContext, DeadlineExceeded, Cancelled
from .base import Searcher, SearchArgs
from .registry import Provider, ProviderRegistry
from .orchestrator import SearchOrchestrator
from .opener import CommandOpener

__all__ = [
    "Query",
    "QueryState",
    "Result",
    "SearchContext",
    "DeadlineExceeded",
    "Cancelled",
    "Searcher",
    "SearchArgs",
    "Provider",
    "ProviderRegistry",
    "SearchOrchestrator",
    "CommandOpener",
]
