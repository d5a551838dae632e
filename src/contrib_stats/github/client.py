"""GitHub REST API data source built on httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..exceptions import GitHubServiceError
from ..models import Repo, User
from .rate_limit import RateLimitMonitor
from .service import Call, CallbackExecutor

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
_HEADERS = {"Accept": "application/vnd.github.v3+json"}


def _parse_repos(payload: list[dict[str, Any]]) -> list[Repo]:
    return [Repo(name=item["name"]) for item in payload]


def _parse_users(payload: list[dict[str, Any]]) -> list[User]:
    return [User(login=item["login"], contributions=item["contributions"]) for item in payload]


class HttpGitHubService:
    """Talks to the GitHub REST API with basic-auth credentials.

    Coroutine methods share one ``httpx.AsyncClient``; :class:`Call` handles run
    on a separate ``httpx.Client`` so that they can be executed from any thread.
    """

    def __init__(
        self,
        username: str,
        token: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        executor: CallbackExecutor | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")
        self._auth = httpx.BasicAuth(username, token)
        self._timeout = timeout
        self._client = httpx.Client(
            base_url=self.base_url, auth=self._auth, headers=_HEADERS, timeout=timeout,
            transport=transport,
        )
        # created on first coroutine call so that blocking-only use needs no async cleanup
        self._async_client: httpx.AsyncClient | None = None
        self._async_transport = async_transport
        self._owns_executor = executor is None
        self._executor = executor or CallbackExecutor(name="github-callback")
        self._closed = False
        self.rate_limit = RateLimitMonitor()

    @property
    def async_client(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self.base_url, auth=self._auth, headers=_HEADERS, timeout=self._timeout,
                transport=self._async_transport,
            )
        return self._async_client

    def __enter__(self) -> HttpGitHubService:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    async def __aenter__(self) -> HttpGitHubService:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    def close(self) -> None:
        """Release the blocking client and the callback threads.

        Use :meth:`aclose` once any coroutine method has been called, since
        only it can close the async client.
        """
        if self._async_client is not None and not self._async_client.is_closed:
            logger.warning("Async client left open; close the service with aclose()")
        self._client.close()
        if self._owns_executor and not self._closed:
            self._executor.shutdown()
        self._closed = True

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._async_client.aclose()
        self.close()

    def _decode(self, response: httpx.Response) -> list[dict[str, Any]]:
        self.rate_limit.update(response)
        if response.is_error:
            raise GitHubServiceError(
                f"{response.request.method} {response.request.url.path} failed",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return []
        return response.json()

    async def _get(self, path: str) -> list[dict[str, Any]]:
        await self.rate_limit.wait_if_needed()
        logger.debug("GET %s", path)
        try:
            response = await self.async_client.get(path, params={"per_page": 100})
        except httpx.HTTPError as exc:
            raise GitHubServiceError(f"GET {path} failed: {exc}") from exc
        return self._decode(response)

    def _get_blocking(self, path: str) -> list[dict[str, Any]]:
        self.rate_limit.block_if_needed()
        logger.debug("GET %s", path)
        try:
            response = self._client.get(path, params={"per_page": 100})
        except httpx.HTTPError as exc:
            raise GitHubServiceError(f"GET {path} failed: {exc}") from exc
        return self._decode(response)

    async def get_org_repos(self, org: str) -> list[Repo]:
        return _parse_repos(await self._get(f"/orgs/{org}/repos"))

    async def get_repo_contributors(self, org: str, repo: str) -> list[User]:
        return _parse_users(await self._get(f"/repos/{org}/{repo}/contributors"))

    def get_org_repos_call(self, org: str) -> Call[list[Repo]]:
        return Call(
            lambda: _parse_repos(self._get_blocking(f"/orgs/{org}/repos")),
            self._executor,
            description=f"repos of {org}",
        )

    def get_repo_contributors_call(self, org: str, repo: str) -> Call[list[User]]:
        return Call(
            lambda: _parse_users(self._get_blocking(f"/repos/{org}/{repo}/contributors")),
            self._executor,
            description=f"contributors of {org}/{repo}",
        )
