import aiohttp
import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, List

from repodoc.domain.exceptions import FetchException, RateLimitExceededException
from repodoc.domain.models import RepositoryIdentifier

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=60, connect=10)
MAX_RETRIES = 3
DEFAULT_RETRY_AFTER = 60
RETRYABLE_STATUSES = {500, 502, 503, 504}

class GitHubRestClient:
    """
    Client for the unauthenticated GitHub REST API.
    Handles request headers, transient-failure retries and rate limit detection.
    Every method takes the caller's aiohttp session so one run shares one connection pool.
    """

    def __init__(self, api_url: str = DEFAULT_API_URL):
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repodoc",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.api_url = api_url.rstrip("/")

    def _repo_url(self, identifier: RepositoryIdentifier) -> str:
        return f"{self.api_url}/repos/{identifier.owner}/{identifier.name}"

    async def get_repository(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier) -> Dict[str, Any]:
        """Fetches the raw repository object (GET /repos/{owner}/{name})."""
        return await self._request(session, self._repo_url(identifier), as_json=True)

    async def list_contents(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier) -> List[Dict[str, Any]]:
        """Fetches the raw top-level directory listing (GET /repos/{owner}/{name}/contents)."""
        data = await self._request(session, f"{self._repo_url(identifier)}/contents", as_json=True)
        if not isinstance(data, list):
            raise FetchException(f"{self._repo_url(identifier)}/contents")
        return data

    async def get_file(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier, path: str) -> Dict[str, Any]:
        """Fetches a file object whose 'content' field is base64 encoded."""
        return await self._request(session, f"{self._repo_url(identifier)}/contents/{path}", as_json=True)

    async def download(self, session: aiohttp.ClientSession, locator: str) -> bytes:
        """Downloads the raw bytes behind a listing entry's download_url."""
        return await self._request(session, locator, as_json=False)

    async def _request(self, session: aiohttp.ClientSession, url: str, as_json: bool) -> Any:
        """
        Performs a GET with retries for secondary rate limits, 5xx responses and transport errors.

        Raises:
            RateLimitExceededException: If the primary rate limit is exhausted.
            FetchException: On any other non-success status, or when retries run out.
        """
        for attempt in range(MAX_RETRIES):
            try:
                async with session.get(url, headers=self.headers, timeout=REQUEST_TIMEOUT) as response:
                    if response.status in {403, 429}:
                        if response.headers.get("X-RateLimit-Remaining") == "0":
                            raise RateLimitExceededException(reset_at=_format_reset(response.headers.get("X-RateLimit-Reset")))

                        # Secondary rate limit (abuse detection)
                        retry_after = response.headers.get("Retry-After")
                        if retry_after:
                            # Retry-After may also be an HTTP-date
                            sleep_time = int(retry_after) if retry_after.isdigit() else DEFAULT_RETRY_AFTER
                            logger.warning(f"Secondary rate limit ({response.status}). Sleeping {sleep_time}s...")
                            await asyncio.sleep(sleep_time)
                            continue
                        raise FetchException(url, response.status)

                    if response.status in RETRYABLE_STATUSES:
                        sleep_time = (2 ** attempt) + random.uniform(0, 1)
                        logger.warning(
                            f"Server error ({response.status}) for {url}. "
                            f"Retrying in {sleep_time:.1f}s (attempt {attempt + 1}/{MAX_RETRIES})..."
                        )
                        await asyncio.sleep(sleep_time)
                        continue

                    if response.status != 200:
                        raise FetchException(url, response.status)

                    if as_json:
                        try:
                            return await response.json()
                        except (aiohttp.ContentTypeError, ValueError) as e:
                            # Undecodable bodies are not transient.
                            raise FetchException(url, response.status) from e
                    return await response.read()

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                sleep_time = (2 ** attempt) + random.uniform(0, 1)
                logger.warning(
                    f"Request to {url} failed (attempt {attempt + 1}/{MAX_RETRIES}): {e}. "
                    f"Retrying in {sleep_time:.1f}s..."
                )
                await asyncio.sleep(sleep_time)

        raise FetchException(url)


def _format_reset(raw_reset: str) -> str:
    """Converts the epoch-seconds X-RateLimit-Reset header to an ISO timestamp."""
    if not raw_reset or not raw_reset.isdigit():
        return "unknown"
    return datetime.fromtimestamp(int(raw_reset), tz=timezone.utc).isoformat().replace("+00:00", "Z")
