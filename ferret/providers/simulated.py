import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from ferret.search.base import Searcher, SearchArgs
from ferret.search.context import SearchContext

PER_PAGE = 10


class SimulatedSearchProvider(Searcher):
    """A deterministic search provider for development, testing, and offline environments.

    It returns plausible-looking results based on the keyword and page, allowing
    the dispatcher to be exercised without network access. Latency is simulated
    by waiting on the context, so deadlines and cancellation behave like they
    would against a real upstream.
    """

    name = "simulated"
    title = "Simulated"
    noui = True

    def __init__(self, latency_mean: float = 0.1, results_per_page: int = PER_PAGE):
        self.latency_mean = latency_mean
        self.results_per_page = results_per_page

    def search(self, ctx: SearchContext, args: SearchArgs) -> List[Dict[str, Any]]:
        keyword = args["keyword"]
        page = args["page"]
        rng = random.Random(f"{keyword}:{page}")

        # Simulate network latency
        latency = max(0.0, rng.gauss(self.latency_mean, 0.05)) if self.latency_mean > 0 else 0.0
        if ctx.wait(latency):
            ctx.raise_if_done()

        return self._generate_mock_results(keyword, page, rng)

    def _generate_mock_results(self, keyword: str, page: int, rng: random.Random) -> List[Dict[str, Any]]:
        domains = ["example.com", "test.org", "sample.net", "benchmark.io", "mock.co"]
        epoch = datetime(2016, 1, 1, tzinfo=timezone.utc)
        offset = (page - 1) * self.results_per_page

        results = []
        for i in range(offset, offset + self.results_per_page):
            domain = domains[i % len(domains)]
            record: Dict[str, Any] = {
                "link": f"https://{domain}/search?q={keyword}&id={i}",
                "title": f"Result {i + 1} for '{keyword}'",
                "description": f"This is a simulated search result description for '{keyword}'.",
            }
            # Only some upstreams know when a document was written
            if i % 2 == 0:
                record["date"] = epoch + timedelta(days=rng.randint(0, 3000))
            results.append(record)

        return results
