import base64
import binascii
import json
from datetime import datetime
from typing import Any, Dict, Optional

from repodoc.domain.exceptions import InvalidManifestException
from repodoc.domain.models import (
    NO_DESCRIPTION,
    DependencyManifest,
    DirectoryEntry,
    EntryKind,
    RepositoryMetadata,
)

class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub REST JSON payloads into domain models.
    """

    @staticmethod
    def to_metadata(raw_repo: Dict[str, Any]) -> RepositoryMetadata:
        """
        Transforms a raw GET /repos/{owner}/{name} payload into RepositoryMetadata.

        Args:
            raw_repo (Dict[str, Any]): The repository object from GitHub's REST response.

        Returns:
            RepositoryMetadata: The domain model with description normalized to a placeholder when absent.
        """
        owner_data = raw_repo.get('owner') or {}

        raw_date = raw_repo.get('updated_at')
        if not raw_date:
            raise ValueError("updated_at is required to build RepositoryMetadata.")
        updated_at_dt = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))

        return RepositoryMetadata(
            name=raw_repo.get('name', ''),
            owner=owner_data.get('login', ''),
            description=raw_repo.get('description') or NO_DESCRIPTION,
            star_count=raw_repo.get('stargazers_count') or 0,
            fork_count=raw_repo.get('forks_count') or 0,
            primary_language=raw_repo.get('language') or None,
            last_updated=updated_at_dt,
        )

    @staticmethod
    def to_directory_entry(raw_item: Dict[str, Any]) -> DirectoryEntry:
        """Transforms one item of a contents listing. Only 'dir' items are directories."""
        kind = EntryKind.DIRECTORY if raw_item.get('type') == 'dir' else EntryKind.FILE
        return DirectoryEntry(
            name=raw_item.get('name', ''),
            kind=kind,
            size_bytes=raw_item.get('size'),
            download_locator=raw_item.get('download_url'),
        )

    @staticmethod
    def decode_content(raw_file: Dict[str, Any]) -> str:
        """
        Decodes the base64 'content' field of a contents API file object.

        Raises:
            InvalidManifestException: If the content is missing or not valid base64 UTF-8 text.
        """
        if not isinstance(raw_file, dict):
            raise InvalidManifestException("Expected a file object, got a directory listing.")
        encoded = raw_file.get('content')
        if not isinstance(encoded, str):
            raise InvalidManifestException("File object has no content field.")
        try:
            # GitHub wraps base64 content at 60 columns
            return base64.b64decode(encoded.replace("\n", ""), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidManifestException(f"Content is not base64 encoded UTF-8: {e}") from e

    @staticmethod
    def to_manifest(raw_file: Dict[str, Any]) -> DependencyManifest:
        """
        Transforms a package.json contents API object into a DependencyManifest.

        Raises:
            InvalidManifestException: If the payload cannot be decoded into a JSON object.
        """
        text = GitHubTranslator.decode_content(raw_file)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidManifestException(f"package.json is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidManifestException("package.json top level is not an object.")

        return DependencyManifest(
            dependencies=_string_mapping(data.get('dependencies')),
            dev_dependencies=_string_mapping(data.get('devDependencies')),
            scripts=_string_mapping(data.get('scripts')),
        )


def _string_mapping(value: Optional[Any]) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}
