import asyncio
import logging
from typing import List, NamedTuple, Optional

import aiohttp

from repodoc.domain.exceptions import AnalyzerException
from repodoc.domain.models import DirectoryEntry, EntryKind, RepositoryIdentifier, SampledFile
from repodoc.infrastructure.acl import GitHubTranslator
from repodoc.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)

# Cap on downloads per run to stay well inside the unauthenticated rate limit
MAX_SAMPLED_FILES = 10
SAMPLED_EXTENSIONS = (".js", ".ts", ".jsx", ".tsx", ".py", ".java")
SAMPLED_NAMES = frozenset({"README.md", "index.html"})


class ContentSample(NamedTuple):
    entries: List[DirectoryEntry]
    files: List[SampledFile]


def is_sample_candidate(entry: DirectoryEntry) -> bool:
    if entry.kind != EntryKind.FILE:
        return False
    return entry.name.endswith(SAMPLED_EXTENSIONS) or entry.name in SAMPLED_NAMES


def select_candidates(entries: List[DirectoryEntry]) -> List[DirectoryEntry]:
    """First MAX_SAMPLED_FILES matching files, in listing order."""
    return [entry for entry in entries if is_sample_candidate(entry)][:MAX_SAMPLED_FILES]


class ContentSampler:
    """
    Lists the repository's top level and downloads a bounded sample of files concurrently.
    Individual download failures drop the file; they never fail the batch.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client

    async def sample(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier) -> ContentSample:
        entries = await self._list_entries(session, identifier)
        candidates = select_candidates(entries)

        tasks = [self._download(session, entry) for entry in candidates]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        files: List[SampledFile] = []
        for entry, result in zip(candidates, results):
            if isinstance(result, BaseException):
                logger.debug(f"Dropping {entry.name} from the sample: {result}")
            elif result is not None:
                files.append(result)

        logger.info(
            f"Sampled {len(files)}/{len(candidates)} candidate files "
            f"from {len(entries)} top-level entries of {identifier.full_name}."
        )
        return ContentSample(entries=entries, files=files)

    async def _list_entries(self, session: aiohttp.ClientSession, identifier: RepositoryIdentifier) -> List[DirectoryEntry]:
        try:
            raw_items = await self.github_client.list_contents(session, identifier)
        except AnalyzerException as e:
            logger.warning(f"Could not list contents of {identifier.full_name}: {e}")
            return []
        return [GitHubTranslator.to_directory_entry(item) for item in raw_items if isinstance(item, dict)]

    async def _download(self, session: aiohttp.ClientSession, entry: DirectoryEntry) -> Optional[SampledFile]:
        if not entry.download_locator:
            logger.debug(f"{entry.name} has no download locator.")
            return None
        raw = await self.github_client.download(session, entry.download_locator)
        return SampledFile(
            name=entry.name,
            content=raw.decode("utf-8", errors="replace"),
            size_bytes=entry.size_bytes or 0,
        )
