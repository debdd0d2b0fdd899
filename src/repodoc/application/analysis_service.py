import logging
import aiohttp

from repodoc.application.content_sampler import ContentSampler
from repodoc.application.manifest_parser import ManifestParser
from repodoc.application.metadata_fetcher import MetadataFetcher
from repodoc.domain.models import AnalysisReport, RepositorySnapshot
from repodoc.domain.synthesizer import synthesize
from repodoc.domain.url_resolver import resolve_repository_url
from repodoc.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)

# Listing and file downloads share one pool per run
CONNECTOR_LIMIT = 10


class AnalysisService:
    """
    Service responsible for running the analysis pipeline for one repository URL:
    resolve, fetch metadata, sample contents, parse the manifest, synthesize documentation.

    Only URL resolution and the metadata lookup can fail the run. Later stages
    degrade to omissions and placeholder text.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client
        self.metadata_fetcher = MetadataFetcher(github_client)
        self.content_sampler = ContentSampler(github_client)
        self.manifest_parser = ManifestParser(github_client)

    async def analyze(self, url: str) -> AnalysisReport:
        """
        Produces a fresh documentation bundle for the repository behind `url`.

        Raises:
            InvalidUrlException: Before any network call, if the URL is malformed.
            RepositoryNotFoundException: If the repository is missing or private.
        """
        identifier = resolve_repository_url(url)
        logger.info(f"Starting analysis of {identifier.full_name}.")

        async with aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=CONNECTOR_LIMIT),
        ) as session:
            metadata = await self.metadata_fetcher.fetch(session, identifier)
            sample = await self.content_sampler.sample(session, identifier)
            manifest = await self.manifest_parser.parse(session, identifier)

        snapshot = RepositorySnapshot(
            metadata=metadata,
            entries=sample.entries,
            files=sample.files,
            manifest=manifest,
        )
        bundle = synthesize(snapshot)

        logger.info(f"Analysis of {identifier.full_name} completed.")
        return AnalysisReport(identifier=identifier, metadata=metadata, bundle=bundle)
