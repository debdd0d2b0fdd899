import logging
from typing import Optional

import aiohttp

from repodoc.domain.exceptions import AnalyzerException
from repodoc.domain.models import DependencyManifest, RepositoryIdentifier
from repodoc.infrastructure.acl import GitHubTranslator
from repodoc.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


class ManifestParser:
    """
    Fetches and decodes package.json. A missing or unreadable manifest is an
    expected outcome and yields None.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client

    async def parse(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier) -> Optional[DependencyManifest]:
        try:
            raw_file = await self.github_client.get_file(session, identifier, MANIFEST_NAME)
            manifest = GitHubTranslator.to_manifest(raw_file)
        except AnalyzerException as e:
            # FetchException, RateLimitExceededException and InvalidManifestException all land here
            logger.debug(f"No usable {MANIFEST_NAME} for {identifier.full_name}: {e}")
            return None

        logger.info(
            f"Parsed {MANIFEST_NAME} for {identifier.full_name}: "
            f"{len(manifest.dependencies)} dependencies, {len(manifest.dev_dependencies)} dev dependencies."
        )
        return manifest
