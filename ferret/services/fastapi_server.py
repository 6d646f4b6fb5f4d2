#!/usr/bin/env python3
"""FastAPI search service exposing the provider list and single-provider search."""

from __future__ import annotations

import time
import uuid
from typing import Dict, List, Optional

from fastapi import FastAPI, Query as QueryParam, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
)

from ferret.search.orchestrator import SearchOrchestrator
from ferret.search.parsing import parse_page, parse_timeout
from ferret.search.registry import ProviderRegistry
from ferret.search.schema import Query
from ferret.shared.errors import FerretError, format_user_error, map_to_http_status
from ferret.shared.logger import SearchLogger
from ferret.shared.settings import FerretSettings, get_settings


class ProviderInfo(BaseModel):
    name: str
    title: str
    enabled: bool
    noui: bool


def create_app(
    registry: Optional[ProviderRegistry] = None,
    settings: Optional[FerretSettings] = None,
) -> FastAPI:
    """Build the HTTP app around a registry (the bundled providers by default)."""
    settings = settings or get_settings()
    if registry is None:
        from ferret.providers import build_registry
        registry = build_registry(settings)

    metrics_registry = CollectorRegistry()
    request_count = Counter(
        "ferret_search_requests_total",
        "Total search requests",
        ["provider", "status"],
        registry=metrics_registry,
    )
    request_latency = Histogram(
        "ferret_search_latency_seconds",
        "Search request latency in seconds",
        ["provider"],
        registry=metrics_registry,
    )

    app = FastAPI(title="Ferret Search Service", version="1.0.0")
    app.state.registry = registry

    @app.get("/health")
    def health() -> Dict[str, object]:
        return {"status": "ok", "providers": registry.providers()}

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(
            generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/providers", response_model=List[ProviderInfo])
    def providers(ui: bool = QueryParam(False)) -> List[ProviderInfo]:
        """Every registered provider in name order.

        With ``ui=true`` only providers meant for a user interface are listed:
        disabled and ``noui`` providers are left out.
        """
        return [
            ProviderInfo(name=p.name, title=p.title, enabled=p.enabled, noui=p.noui)
            for p in registry.entries()
            if not ui or (p.enabled and not p.noui)
        ]

    @app.get("/search")
    def search(
        provider: str = QueryParam(""),
        keyword: str = QueryParam(""),
        page: str = QueryParam(""),
        timeout: str = QueryParam(""),
    ) -> JSONResponse:
        # Each request logs under its own run_id
        logger = SearchLogger(
            "http",
            run_id=str(uuid.uuid4()),
            level=settings.log_level,
            log_format=settings.log_format,
            log_directory=settings.log_directory,
        )
        # Goto is a local side effect; it is never performed on behalf of a remote caller
        orchestrator = SearchOrchestrator(registry, opener=None, logger=logger)
        query = Query(
            provider=provider,
            keyword=keyword,
            page=parse_page(page),
            timeout=parse_timeout(timeout, default=settings.search_timeout),
        )

        label = provider if provider in registry else "unknown"
        start_time = time.time()
        try:
            orchestrator.do(query)
        except FerretError as exc:
            status = query.http_status or map_to_http_status(exc)
            request_count.labels(provider=label, status=str(status)).inc()
            return JSONResponse(
                status_code=status,
                content={"error": format_user_error(exc), "query": query.model_dump(mode="json")},
            )
        finally:
            request_latency.labels(provider=label).observe(time.time() - start_time)

        request_count.labels(provider=label, status="200").inc()
        return JSONResponse(content=query.model_dump(mode="json"))

    return app


def main(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ferret.services.fastapi_server:create_app",
        factory=True,
        host=host or settings.http_host,
        port=port or settings.http_port,
    )


if __name__ == "__main__":
    main()
