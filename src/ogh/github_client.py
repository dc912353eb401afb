"""GitHub GraphQL and REST API client for the review queue and build listing."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from .cache import NullCache, ResponseCache
from .config import Config
from .errors import ApiError

logger = logging.getLogger(__name__)

PULL_REQUESTS_QUERY = """
query($owner: String!, $name: String!, $first: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequests(states: OPEN, first: $first, orderBy: {field: UPDATED_AT, direction: DESC}) {
      edges {
        node {
          number
          title
          mergeable
          author { login }
          participants(first: 30) {
            edges { node { login } }
          }
          reviews(last: 100) {
            nodes {
              author { login }
              state
              updatedAt
            }
          }
          commits(last: 1) {
            edges {
              node {
                commit {
                  checkSuites(first: 20) {
                    edges {
                      node {
                        checkRuns(first: 50) {
                          edges { node { name status conclusion } }
                        }
                      }
                    }
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
""".strip()


class GitHubClient:
    """Small client for the GitHub GraphQL and Actions REST APIs."""

    _API_URL = "https://api.github.com"
    _PULL_REQUEST_PAGE_SIZE = 100
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(
        self,
        config: Config,
        cache: Optional[ResponseCache] = None,
        timeout_seconds: int = 30,
    ) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including repository and token.
            cache: Store for raw response bodies; nothing is cached when omitted.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._cache = cache or NullCache()
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._API_URL}/{path.lstrip('/')}"

    def _is_rate_limited(self, response: requests.Response) -> bool:
        """GitHub reports an exhausted primary rate limit as 403 with no remaining quota."""
        return response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Seconds to wait before retrying ``response``.

        ``Retry-After`` (secondary rate limits, 429) wins over the epoch in
        ``X-RateLimit-Reset`` (primary rate limit); otherwise back off
        exponentially. The result is capped at ``_MAX_BACKOFF_SECONDS``.
        """
        headers = response.headers
        retry_after = headers.get("Retry-After", "")
        if retry_after.isdigit():
            return min(self._MAX_BACKOFF_SECONDS, max(1, int(retry_after)))

        reset_at = headers.get("X-RateLimit-Reset", "")
        if self._is_rate_limited(response) and reset_at.isdigit():
            wait_seconds = int(reset_at) - int(time.time())
            return min(self._MAX_BACKOFF_SECONDS, max(1, wait_seconds))

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _request_json(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Execute a request, retrying rate limits, 5xx responses and connection errors.

        Raises:
            ApiError: If the request repeatedly fails, returns HTTP >= 400,
                or does not return a JSON object.
        """
        url = self._build_url(path)
        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.request(
                    method,
                    url,
                    params=params,
                    json=body,
                    timeout=self._timeout_seconds,
                )
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"GitHub request failed after retries: {method} {url}") from exc
                logger.warning(
                    "GitHub request raised, retrying",
                    extra={"url": url, "attempt": attempt, "error": str(exc)},
                )
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = (
                status_code == 429
                or 500 <= status_code <= 599
                or self._is_rate_limited(response)
            )

            if is_retryable and attempt < self._MAX_RETRIES:
                logger.warning(
                    "GitHub request returned a retryable status",
                    extra={"url": url, "attempt": attempt, "status_code": status_code},
                )
                time.sleep(self._extract_backoff_seconds(response, attempt))
                continue

            if status_code >= 400:
                raise ApiError(
                    "GitHub API request failed: "
                    f"{method} {url} returned {status_code} - {response.text}"
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise ApiError(f"GitHub API returned invalid JSON: {method} {url}") from exc

            if not isinstance(payload, dict):
                raise ApiError(f"GitHub API returned unexpected payload shape: {method} {url}")

            return payload

        raise ApiError(f"GitHub request failed after retries: {method} {url}") from last_error

    def _cached(self, key: str, fetch: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        """Return the cached payload for ``key`` or fetch and store it."""
        cached = self._cache.get(key)
        if cached is not None:
            try:
                payload = json.loads(cached)
            except ValueError:
                logger.warning("Ignoring unreadable cache entry", extra={"cache_key": key})
            else:
                if isinstance(payload, dict):
                    return payload

        payload = fetch()
        self._cache.set(key, json.dumps(payload))
        return payload

    def fetch_open_pull_requests(self) -> Dict[str, Any]:
        """Fetch open pull requests of the configured repository via GraphQL.

        Returns:
            The raw GraphQL response graph.

        Raises:
            ApiError: If the request fails or the response reports GraphQL errors.
        """
        owner, name = self._config.owner, self._config.repo

        def fetch() -> Dict[str, Any]:
            payload = self._request_json(
                "POST",
                "graphql",
                body={
                    "query": PULL_REQUESTS_QUERY,
                    "variables": {
                        "owner": owner,
                        "name": name,
                        "first": self._PULL_REQUEST_PAGE_SIZE,
                    },
                },
            )
            errors = payload.get("errors")
            if errors:
                messages = "; ".join(
                    str(error.get("message", error)) if isinstance(error, dict) else str(error)
                    for error in errors
                )
                raise ApiError(f"GitHub GraphQL query failed for {owner}/{name}: {messages}")
            return payload

        return self._cached(f"pr-{owner}-{name}", fetch)

    def list_workflow_runs(
        self,
        owner: str,
        branch: Optional[str] = None,
        workflow_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Fetch recent GitHub Actions runs of ``owner``'s copy of the repository.

        Args:
            owner: Account owning the repository, upstream or a fork.
            branch: Only runs of this branch when given.
            workflow_id: Only runs of this workflow when given.

        Returns:
            The raw ``/actions/runs`` REST response.
        """
        repo = self._config.repo
        if workflow_id is not None:
            path = f"repos/{owner}/{repo}/actions/workflows/{workflow_id}/runs"
        else:
            path = f"repos/{owner}/{repo}/actions/runs"

        params: Dict[str, Any] = {"per_page": 30}
        if branch:
            params["branch"] = branch

        key = f"builds-{owner}-{repo}-{branch or 'all'}-{workflow_id or 'all'}"
        return self._cached(key, lambda: self._request_json("GET", path, params=params))
