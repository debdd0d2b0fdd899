import unittest

from repodoc.application.content_sampler import MAX_SAMPLED_FILES, ContentSampler, select_candidates
from repodoc.domain.exceptions import FetchException
from repodoc.domain.models import DirectoryEntry, EntryKind, RepositoryIdentifier

IDENTIFIER = RepositoryIdentifier(owner="octocat", name="hello-world")


def _item(name, kind="file", size=10):
    return {
        "name": name,
        "type": kind,
        "size": size,
        "download_url": f"https://raw.example.com/{name}" if kind == "file" else None,
    }


class _FakeGitHubClient:
    def __init__(self, items, failing=(), listing_error=None) -> None:
        self.items = items
        self.failing = set(failing)
        self.listing_error = listing_error
        self.downloads = []

    async def list_contents(self, session, identifier):
        if self.listing_error:
            raise self.listing_error
        return self.items

    async def download(self, session, locator):
        self.downloads.append(locator)
        name = locator.rsplit("/", 1)[-1]
        if name in self.failing:
            raise FetchException(locator, 500)
        return f"// {name}".encode("utf-8")


class TestSelectCandidates(unittest.TestCase):
    def test_filters_by_extension_and_exact_name(self) -> None:
        entries = [
            DirectoryEntry(name="src", kind=EntryKind.DIRECTORY),
            DirectoryEntry(name="README.md", kind=EntryKind.FILE),
            DirectoryEntry(name="CHANGELOG.md", kind=EntryKind.FILE),
            DirectoryEntry(name="index.html", kind=EntryKind.FILE),
            DirectoryEntry(name="about.html", kind=EntryKind.FILE),
            DirectoryEntry(name="setup.py", kind=EntryKind.FILE),
            DirectoryEntry(name="Main.java", kind=EntryKind.FILE),
            DirectoryEntry(name="lib.ts", kind=EntryKind.DIRECTORY),
            DirectoryEntry(name="package.json", kind=EntryKind.FILE),
        ]

        names = [entry.name for entry in select_candidates(entries)]

        self.assertEqual(names, ["README.md", "index.html", "setup.py", "Main.java"])

    def test_caps_in_listing_order(self) -> None:
        entries = [DirectoryEntry(name=f"f{i:02d}.js", kind=EntryKind.FILE) for i in range(25)]

        names = [entry.name for entry in select_candidates(entries)]

        self.assertEqual(len(names), MAX_SAMPLED_FILES)
        self.assertEqual(names[0], "f00.js")
        self.assertEqual(names[-1], "f09.js")


class TestContentSampler(unittest.IsolatedAsyncioTestCase):
    async def test_sample_never_exceeds_cap(self) -> None:
        items = [_item(f"module{i}.ts") for i in range(40)]
        client = _FakeGitHubClient(items)

        sample = await ContentSampler(client).sample(None, IDENTIFIER)

        self.assertEqual(len(sample.entries), 40)
        self.assertLessEqual(len(sample.files), MAX_SAMPLED_FILES)
        self.assertEqual(len(client.downloads), MAX_SAMPLED_FILES)

    async def test_failed_downloads_are_dropped_in_place(self) -> None:
        items = [_item("a.js"), _item("b.js"), _item("c.py"), _item("d.tsx")]
        client = _FakeGitHubClient(items, failing={"b.js", "d.tsx"})

        sample = await ContentSampler(client).sample(None, IDENTIFIER)

        self.assertEqual([f.name for f in sample.files], ["a.js", "c.py"])
        self.assertEqual(sample.files[0].content, "// a.js")
        self.assertEqual(sample.files[0].size_bytes, 10)

    async def test_directories_are_listed_but_not_downloaded(self) -> None:
        items = [_item("src", kind="dir"), _item("app.py", size=99)]
        client = _FakeGitHubClient(items)

        sample = await ContentSampler(client).sample(None, IDENTIFIER)

        self.assertEqual([e.kind for e in sample.entries], [EntryKind.DIRECTORY, EntryKind.FILE])
        self.assertEqual(client.downloads, ["https://raw.example.com/app.py"])
        self.assertEqual(sample.files[0].size_bytes, 99)

    async def test_listing_failure_degrades_to_empty_sample(self) -> None:
        client = _FakeGitHubClient([], listing_error=FetchException("https://api.github.com/x", 404))

        sample = await ContentSampler(client).sample(None, IDENTIFIER)

        self.assertEqual(sample.entries, [])
        self.assertEqual(sample.files, [])

    async def test_invalid_utf8_is_replaced(self) -> None:
        class _BinaryClient(_FakeGitHubClient):
            async def download(self, session, locator):
                return b"const x = 1; \xff\xfe"

        sample = await ContentSampler(_BinaryClient([_item("x.js")])).sample(None, IDENTIFIER)

        self.assertTrue(sample.files[0].content.startswith("const x = 1;"))
        self.assertIn("�", sample.files[0].content)
