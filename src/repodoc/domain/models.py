from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

NO_DESCRIPTION = "No description available"


class RepositoryIdentifier(BaseModel):
    """
    The (owner, name) pair addressing a hosted repository.
    Derived once from the input URL.
    """
    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, description="Login name of the repository owner")
    name: str = Field(..., min_length=1, description="Name of the repository")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepositoryMetadata(BaseModel):
    """
    Immutable snapshot of the repository attributes used in the overview.
    Fetched once per analysis run.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the repository")
    owner: str = Field(..., description="Login name of the repository owner")
    description: str = Field(default=NO_DESCRIPTION, description="Repository description")
    star_count: int = Field(..., ge=0, description="Total number of stargazers")
    fork_count: int = Field(..., ge=0, description="Total number of forks")
    primary_language: Optional[str] = Field(default=None, description="Primary language reported by the host")
    last_updated: datetime = Field(..., description="Timestamp of the last update")


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class DirectoryEntry(BaseModel):
    """One item of the non-recursive top-level listing."""
    model_config = ConfigDict(frozen=True)

    name: str
    kind: EntryKind
    size_bytes: Optional[int] = Field(default=None, ge=0)
    download_locator: Optional[str] = Field(default=None, description="URL of the raw file content")


class SampledFile(BaseModel):
    """A downloaded file whose text is analyzed."""
    model_config = ConfigDict(frozen=True)

    name: str
    content: str
    size_bytes: int = Field(..., ge=0)

    @property
    def extension(self) -> str:
        _, dot, suffix = self.name.rpartition(".")
        return f".{suffix.lower()}" if dot else ""


class DependencyManifest(BaseModel):
    """Decoded package.json fields relevant to documentation."""
    model_config = ConfigDict(frozen=True)

    dependencies: Dict[str, str] = Field(default_factory=dict)
    dev_dependencies: Dict[str, str] = Field(default_factory=dict)
    scripts: Dict[str, str] = Field(default_factory=dict)


class RepositorySnapshot(BaseModel):
    """Everything the documentation synthesizer reads."""
    model_config = ConfigDict(frozen=True)

    metadata: RepositoryMetadata
    entries: List[DirectoryEntry] = Field(default_factory=list)
    files: List[SampledFile] = Field(default_factory=list, max_length=10)
    manifest: Optional[DependencyManifest] = None


class DocumentationBundle(BaseModel):
    """
    The six documentation sections produced by one analysis run.
    A new run replaces the bundle wholesale.
    """
    model_config = ConfigDict(frozen=True)

    overview: str
    structure: str
    modules: str
    diagram: str
    installation: str
    usage: str

    def to_markdown(self) -> str:
        """
        Serializes the bundle into a single Markdown document.

        Unlike the other five sections, the diagram is not joined as raw text:
        it gets an "## Architecture Diagram" heading and a mermaid code fence
        so the exported file renders on hosts that understand the notation.
        """
        diagram_block = f"## Architecture Diagram\n\n```mermaid\n{self.diagram}\n```"
        sections = [
            self.overview,
            self.structure,
            self.modules,
            diagram_block,
            self.installation,
            self.usage,
        ]
        return "\n\n".join(sections)


class AnalysisReport(BaseModel):
    """Result of a successful analysis run."""
    model_config = ConfigDict(frozen=True)

    identifier: RepositoryIdentifier
    metadata: RepositoryMetadata
    bundle: DocumentationBundle
