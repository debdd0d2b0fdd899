import base64
import json
import unittest

from repodoc.application.manifest_parser import MANIFEST_NAME, ManifestParser
from repodoc.application.metadata_fetcher import MetadataFetcher
from repodoc.domain.exceptions import (
    FetchException,
    RateLimitExceededException,
    RepositoryNotFoundException,
)
from repodoc.domain.models import RepositoryIdentifier

IDENTIFIER = RepositoryIdentifier(owner="bar", name="foo")

RAW_REPO = {
    "name": "foo",
    "owner": {"login": "bar"},
    "description": "A demo",
    "stargazers_count": 10,
    "forks_count": 2,
    "language": "TypeScript",
    "updated_at": "2024-05-06T07:08:09Z",
}


class _FakeGitHubClient:
    def __init__(self, repo=None, repo_error=None, file_payload=None, file_error=None) -> None:
        self.repo = repo
        self.repo_error = repo_error
        self.file_payload = file_payload
        self.file_error = file_error
        self.requested_paths = []

    async def get_repository(self, session, identifier):
        if self.repo_error:
            raise self.repo_error
        return self.repo

    async def get_file(self, session, identifier, path):
        self.requested_paths.append(path)
        if self.file_error:
            raise self.file_error
        return self.file_payload


class TestMetadataFetcher(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_translates_repository(self) -> None:
        fetcher = MetadataFetcher(_FakeGitHubClient(repo=RAW_REPO))

        metadata = await fetcher.fetch(None, IDENTIFIER)

        self.assertEqual(metadata.name, "foo")
        self.assertEqual(metadata.star_count, 10)
        self.assertEqual(metadata.primary_language, "TypeScript")

    async def test_missing_repository_raises_not_found(self) -> None:
        cause = FetchException("https://api.github.com/repos/bar/foo", 404)
        fetcher = MetadataFetcher(_FakeGitHubClient(repo_error=cause))

        with self.assertRaises(RepositoryNotFoundException) as ctx:
            await fetcher.fetch(None, IDENTIFIER)

        self.assertIs(ctx.exception.__cause__, cause)
        self.assertEqual(ctx.exception.full_name, "bar/foo")

    async def test_rate_limit_also_raises_not_found(self) -> None:
        fetcher = MetadataFetcher(_FakeGitHubClient(repo_error=RateLimitExceededException("2026-01-01T00:00:00Z")))

        with self.assertRaises(RepositoryNotFoundException):
            await fetcher.fetch(None, IDENTIFIER)

    async def test_truncated_payload_raises_not_found(self) -> None:
        fetcher = MetadataFetcher(_FakeGitHubClient(repo={"name": "foo", "owner": {"login": "bar"}}))

        with self.assertRaises(RepositoryNotFoundException) as ctx:
            await fetcher.fetch(None, IDENTIFIER)

        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    async def test_non_object_payload_raises_not_found(self) -> None:
        fetcher = MetadataFetcher(_FakeGitHubClient(repo=[RAW_REPO]))

        with self.assertRaises(RepositoryNotFoundException):
            await fetcher.fetch(None, IDENTIFIER)


class TestManifestParser(unittest.IsolatedAsyncioTestCase):
    @staticmethod
    def _payload(text: str) -> dict:
        return {"content": base64.b64encode(text.encode("utf-8")).decode("ascii")}

    async def test_parses_package_json(self) -> None:
        payload = self._payload(json.dumps({
            "dependencies": {"express": "^4"},
            "scripts": {"start": "node server.js"},
        }))
        client = _FakeGitHubClient(file_payload=payload)

        manifest = await ManifestParser(client).parse(None, IDENTIFIER)

        self.assertEqual(client.requested_paths, [MANIFEST_NAME])
        self.assertEqual(manifest.dependencies, {"express": "^4"})
        self.assertEqual(manifest.dev_dependencies, {})
        self.assertEqual(manifest.scripts, {"start": "node server.js"})

    async def test_missing_manifest_is_none(self) -> None:
        client = _FakeGitHubClient(file_error=FetchException("https://api.github.com/x", 404))

        self.assertIsNone(await ManifestParser(client).parse(None, IDENTIFIER))

    async def test_malformed_manifest_is_none(self) -> None:
        client = _FakeGitHubClient(file_payload=self._payload("{\"dependencies\": "))

        self.assertIsNone(await ManifestParser(client).parse(None, IDENTIFIER))

    async def test_rate_limited_manifest_is_none(self) -> None:
        client = _FakeGitHubClient(file_error=RateLimitExceededException("2026-01-01T00:00:00Z"))

        self.assertIsNone(await ManifestParser(client).parse(None, IDENTIFIER))
