from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_TIMEOUT = timedelta(milliseconds=5000)


class QueryState(str, Enum):
    """Lifecycle of a Query through SearchOrchestrator.do."""
    CREATED = "created"
    REJECTED = "rejected"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELED = "canceled"
    BACKEND_FAILED = "backend_failed"
    GOTO_RESOLVED = "goto_resolved"
    GOTO_FAILED = "goto_failed"


class Result(BaseModel):
    """Normalized data model for a single search result."""
    link: str = Field(..., description="Resolvable link to the hit")
    title: str = Field(..., description="Short label of the hit")
    description: str = Field("", description="Free text summary, possibly empty")
    date: Optional[datetime] = Field(None, description="Timestamp of the hit; None when unknown")


class Query(BaseModel):
    """One search request together with its accumulated outcome.

    The orchestrator mutates the instance in place: bookkeeping fields
    (start, elapsed, http_status, state) and results are written as the
    query moves through validation, dispatch and the optional goto.
    """
    provider: str = ""
    keyword: str = ""
    page: int = 1
    goto: int = 0
    timeout: timedelta = DEFAULT_TIMEOUT
    start: Optional[datetime] = None
    elapsed: Optional[timedelta] = None
    http_status: Optional[int] = None
    results: List[Result] = Field(default_factory=list)
    state: QueryState = QueryState.CREATED

    @property
    def is_goto(self) -> bool:
        """True when the query was answered by opening a result instead of listing them."""
        return self.state == QueryState.GOTO_RESOLVED

    @property
    def elapsed_ms(self) -> int:
        if self.elapsed is None:
            return 0
        return int(self.elapsed / timedelta(milliseconds=1))
