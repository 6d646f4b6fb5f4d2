import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from ferret.search.context import Cancelled, ContextError, DeadlineExceeded, SearchContext
from ferret.search.registry import Provider, ProviderRegistry
from ferret.search.schema import Query, QueryState, Result
from ferret.shared.errors import (
    BackendFailureError,
    GotoCommandFailedError,
    InvalidGotoIndexError,
    InvalidPageError,
    MissingKeywordError,
    ProviderNotFoundError,
    QueryError,
    SearchCanceledError,
    SearchTimeoutError,
)
from ferret.shared.logger import SearchLogger

Opener = Callable[[str], None]


class SearchOrchestrator:
    """Validates a Query, dispatches it to its provider under a deadline and
    normalizes the outcome.

    The orchestrator holds no per-query state, so ``do`` may run concurrently
    for independent Query values.

    Example:
        registry = build_registry(settings)
        orchestrator = SearchOrchestrator(registry, opener=CommandOpener("xdg-open"))
        query = orchestrator.do(Query(provider="github", keyword="intent"))
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        opener: Optional[Opener] = None,
        logger: Optional[SearchLogger] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            registry: Populated provider registry.
            opener: Callable receiving the link to open for goto queries. Goto
                    queries fail with GotoCommandFailedError when missing.
            logger: Event logger; one is created for the "orchestrator"
                    component when omitted.
        """
        self.registry = registry
        self.opener = opener
        self.logger = logger or SearchLogger("orchestrator")

    def do(self, query: Query, ctx: Optional[SearchContext] = None) -> Query:
        """Run the query and return it populated with results.

        The query is updated in place before any error is raised, so callers
        holding it can still read ``http_status`` and ``state``.

        Raises:
            ProviderNotFoundError, MissingKeywordError, InvalidPageError:
                validation failed; no backend call was made.
            SearchTimeoutError, SearchCanceledError, BackendFailureError:
                dispatch failed; results are empty.
            InvalidGotoIndexError, GotoCommandFailedError: the goto failed.
        """
        provider = self._validate(query)

        results = self._dispatch(provider, query, ctx or SearchContext.background())
        query.results = results
        query.state = QueryState.COMPLETED
        self.logger.log("search_completed", {
            "provider": query.provider,
            "results": len(results),
            "elapsed_ms": query.elapsed_ms,
        })

        if query.goto != 0:
            self._goto(query)

        return query

    def _validate(self, query: Query) -> Provider:
        if query.page <= 0:
            raise self._reject(query, InvalidPageError(
                "invalid page #. It should be greater than 0",
                metadata={"page": query.page},
            ))

        try:
            provider = self.registry.provider_by_name(query.provider)
        except ProviderNotFoundError as exc:
            raise self._reject(query, ProviderNotFoundError(
                "invalid search provider. Possible search providers are "
                f"{self.registry.providers()}",
                metadata={"provider": query.provider},
            )) from exc

        if not query.keyword:
            raise self._reject(query, MissingKeywordError("missing keyword"))

        query.state = QueryState.VALIDATED
        return provider

    def _reject(self, query: Query, error: QueryError) -> QueryError:
        query.http_status = int(error.http_status)
        query.state = QueryState.REJECTED
        self.logger.log("query_rejected", {"provider": query.provider, "error": error.message})
        return error

    def _dispatch(self, provider: Provider, query: Query, parent: SearchContext) -> List[Result]:
        query.start = datetime.now(timezone.utc)
        query.state = QueryState.DISPATCHED
        self.logger.log("search_started", {
            "provider": provider.name,
            "keyword": query.keyword,
            "page": query.page,
            "timeout_ms": int(query.timeout.total_seconds() * 1000),
        })

        with SearchContext.with_timeout(parent, query.timeout.total_seconds()) as ctx:
            try:
                raw_results = self._race(provider, query, ctx)
            except Exception as exc:
                raise self._classify(query, ctx, exc) from exc

            try:
                results = [self._normalize(raw) for raw in raw_results]
            except (KeyError, TypeError, ValueError) as exc:
                raise self._fail(
                    query,
                    QueryState.BACKEND_FAILED,
                    BackendFailureError(f"failed to search due to malformed result: {exc}"),
                ) from exc

        query.elapsed = datetime.now(timezone.utc) - query.start
        return results

    def _race(self, provider: Provider, query: Query, ctx: SearchContext) -> List[Mapping[str, Any]]:
        """Run the backend on a worker thread; the first of backend or context wins."""
        finished = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"ferret-{provider.name}")
        try:
            future = executor.submit(provider.search, ctx, {"page": query.page, "keyword": query.keyword})
            future.add_done_callback(lambda _: finished.set())
            ctx.add_done_callback(finished.set)
            finished.wait()

            if future.done():
                return list(future.result())
            # Backend lost the race; its thread is abandoned and sees ctx finished
            raise ctx.err()
        finally:
            ctx.remove_done_callback(finished.set)
            executor.shutdown(wait=False)

    def _classify(self, query: Query, ctx: SearchContext, exc: Exception) -> QueryError:
        reason = exc if isinstance(exc, ContextError) else ctx.err()
        if isinstance(reason, DeadlineExceeded):
            return self._fail(query, QueryState.TIMED_OUT, SearchTimeoutError("timeout"))
        if isinstance(reason, Cancelled):
            return self._fail(query, QueryState.CANCELED, SearchCanceledError("canceled"))
        return self._fail(
            query,
            QueryState.BACKEND_FAILED,
            BackendFailureError(
                f"failed to search due to {exc}",
                metadata={"provider": query.provider, "original_error": type(exc).__name__},
            ),
        )

    def _fail(self, query: Query, state: QueryState, error: QueryError) -> QueryError:
        query.http_status = int(error.http_status)
        query.state = state
        query.results = []
        self.logger.log("search_failed", {
            "provider": query.provider,
            "state": state.value,
            "error": error.message,
        })
        return error

    @staticmethod
    def _normalize(raw: Any) -> Result:
        link = _field(raw, "link")
        title = _field(raw, "title")
        if link is None or title is None:
            raise KeyError("link and title are required")

        description = _field(raw, "description")
        date = _field(raw, "date")

        return Result(
            link=link,
            title=title,
            description=description if isinstance(description, str) else "",
            date=date if isinstance(date, datetime) else None,
        )

    def _goto(self, query: Query) -> None:
        if query.goto < 0 or query.goto > len(query.results):
            query.state = QueryState.GOTO_FAILED
            raise InvalidGotoIndexError(
                f"invalid result # to go. It should be between 1 and {len(query.results)}",
                metadata={"goto": query.goto},
            )

        link = query.results[query.goto - 1].link
        if self.opener is None:
            query.state = QueryState.GOTO_FAILED
            raise GotoCommandFailedError(
                f"failed to go to {link} due to no open command. Check FERRET_GOTO_CMD environment variable"
            )

        try:
            self.opener(link)
        except Exception as exc:
            query.state = QueryState.GOTO_FAILED
            raise GotoCommandFailedError(
                f"failed to go to {link} due to {exc}. Check FERRET_GOTO_CMD environment variable",
                metadata={"link": link},
            ) from exc

        query.state = QueryState.GOTO_RESOLVED
        self.logger.log("goto_opened", {"provider": query.provider, "link": link})


def _field(raw: Any, name: str) -> Any:
    """Read a field off a mapping or an attribute-style record."""
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)
