import logging
import aiohttp

from repodoc.domain.exceptions import (
    FetchException,
    RateLimitExceededException,
    RepositoryNotFoundException,
)
from repodoc.domain.models import RepositoryIdentifier, RepositoryMetadata
from repodoc.infrastructure.acl import GitHubTranslator
from repodoc.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)


class MetadataFetcher:
    """
    Looks up repository attributes. Not found, private, rate-limited and
    unreadable lookups all abort the run as RepositoryNotFoundException.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client

    async def fetch(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier) -> RepositoryMetadata:
        try:
            raw_repo = await self.github_client.get_repository(session, identifier)
            # pydantic's ValidationError is a ValueError
            metadata = GitHubTranslator.to_metadata(raw_repo)
        except (FetchException, RateLimitExceededException, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Metadata lookup for {identifier.full_name} failed: {e}")
            raise RepositoryNotFoundException(identifier.full_name) from e

        logger.info(
            f"Fetched metadata for {identifier.full_name} "
            f"({metadata.star_count} stars, {metadata.fork_count} forks)."
        )
        return metadata
