from typing import Any, Dict, List, Optional

import requests

from ferret.search.base import Searcher, SearchArgs
from ferret.search.context import DeadlineExceeded, SearchContext
from ferret.shared.errors import ProviderError

MAX_DESCRIPTION_LENGTH = 255
PER_PAGE = 10


class GithubSearchProvider(Searcher):
    """Search provider backed by the GitHub code search API.

    Notes on configuration:
    - API access:
        * `url` points at https://api.github.com or a GitHub Enterprise API root
        * `token` is sent as ``Authorization: token <token>`` when set
    - Query scope:
        * `search_user` restricts hits to repositories owned by that user/org
    - Latency / timeouts:
        * The HTTP timeout is whatever is left of the query deadline
    """

    name = "github"
    title = "Github"

    def __init__(
        self,
        url: str = "https://api.github.com",
        token: Optional[str] = None,
        search_user: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.token = token
        self.search_user = search_user
        self.session = session or requests.Session()

    def search(self, ctx: SearchContext, args: SearchArgs) -> List[Dict[str, Any]]:
        page = args.get("page")
        if not isinstance(page, int) or page < 1:
            page = 1
        keyword = args.get("keyword") or ""

        q = keyword
        if self.search_user:
            q += f" user:{self.search_user}"

        headers = {"Accept": "application/vnd.github.v3.text-match+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"

        ctx.raise_if_done()
        timeout = ctx.remaining()
        if timeout is not None and timeout <= 0:
            raise DeadlineExceeded()

        try:
            resp = self.session.get(
                f"{self.url}/search/code",
                params={"page": page, "per_page": PER_PAGE, "q": q},
                headers=headers,
                timeout=timeout,
            )
        except requests.Timeout as e:
            if ctx.deadline is not None:
                raise DeadlineExceeded() from e
            raise ProviderError(f"failed to fetch data. Error: {e}") from e
        except requests.RequestException as e:
            raise ProviderError(f"failed to fetch data. Error: {e}") from e

        if not (200 <= resp.status_code < 300):
            raise ProviderError(f"bad response: {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as e:
            raise ProviderError(f"failed to unmarshal JSON data. Error: {e}") from e

        results = []
        for item in body.get("items") or []:
            if not isinstance(item, dict) or not item.get("html_url"):
                # Malformed entries and entries without a link are skipped
                continue
            repository = item.get("repository") or {}
            path = (item.get("path") or "").lstrip("/")
            results.append({
                "link": item["html_url"],
                "title": f"{repository.get('full_name', '')}/{path}",
                "description": self._describe(item, repository),
            })

        return results

    @staticmethod
    def _describe(item: Dict[str, Any], repository: Dict[str, Any]) -> str:
        """Text-match fragments joined with '...', else the repository description."""
        fragments = [tm.get("fragment") or "" for tm in item.get("text_matches") or []]
        if fragments:
            description = "".join(f"{fragment}..." for fragment in fragments)
        else:
            description = repository.get("description") or ""

        if description.endswith("..."):
            description = description[:-3]
        description = description.strip()

        if len(description) > MAX_DESCRIPTION_LENGTH:
            description = description[:MAX_DESCRIPTION_LENGTH - 3] + "..."
        return description
