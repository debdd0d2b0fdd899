"""
Rule-based documentation synthesis.

Every generator here is a pure function of the repository snapshot: the same
snapshot always produces byte-identical text, and missing inputs degrade to
placeholder text instead of raising.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from repodoc.domain import rules
from repodoc.domain.extractor import analyze_source
from repodoc.domain.models import (
    DocumentationBundle,
    EntryKind,
    RepositorySnapshot,
    SampledFile,
)

TREE_ENTRY_LIMIT = 20
KEY_ITEM_LIMIT = 5
ADVANCED_DEPENDENCY_LIMIT = 10
UNKNOWN_LANGUAGE = "Unknown"
README_NAME = "readme.md"

# (source id, source label, target id, target label)
Edge = Tuple[str, str, str, str]

FRONTEND_TOPOLOGY: Tuple[Edge, ...] = (
    ("A", "User Interface", "B", "{ui} Components"),
    ("B", "", "C", "State Management"),
    ("C", "", "D", "API Calls"),
    ("D", "", "E", "Backend Services"),
    ("E", "", "F", "Database"),
    ("B", "", "G", "UI Components"),
    ("G", "", "H", "Routing"),
    ("H", "", "I", "Pages/Views"),
)
FRONTEND_DATA_LAYER: Tuple[Edge, ...] = (
    ("E", "", "J", "Database Operations"),
    ("J", "", "K", "Data Models"),
)

GENERIC_TOPOLOGY: Tuple[Edge, ...] = (
    ("A", "Application Entry", "B", "Core Logic"),
    ("B", "", "C", "Data Processing"),
    ("C", "", "D", "Output/Results"),
    ("B", "", "E", "Helper Functions"),
    ("E", "", "F", "Utilities"),
)
GENERIC_DATA_LAYER: Tuple[Edge, ...] = (
    ("C", "", "G", "Database"),
    ("G", "", "H", "Data Models"),
)


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _find_main_file(files: Sequence[SampledFile]) -> Optional[SampledFile]:
    for sampled in files:
        lowered = sampled.name.lower()
        if any(marker in lowered for marker in rules.MAIN_FILE_MARKERS):
            return sampled
    return None


def render_graph(edges: Iterable[Edge]) -> str:
    """
    Renders edges as a mermaid flowchart.

    A node carries its [Label] only on first appearance; later mentions use
    the bare id.
    """
    declared = set()
    lines = ["graph TD"]

    def node(node_id: str, label: str) -> str:
        if node_id in declared or not label:
            return node_id
        declared.add(node_id)
        return f"{node_id}[{label}]"

    for source_id, source_label, target_id, target_label in edges:
        lines.append(f"    {node(source_id, source_label)} --> {node(target_id, target_label)}")
    return "\n".join(lines)


def generate_overview(snapshot: RepositorySnapshot) -> str:
    metadata = snapshot.metadata
    tech_stack = rules.detect_tech_stack(snapshot.manifest)
    has_readme = any(f.name.lower() == README_NAME for f in snapshot.files)

    stack_text = _bullets(tech_stack) if tech_stack else "Technology stack detected from code analysis"
    features_text = (
        "Features extracted from README and code analysis"
        if has_readme
        else "Features analyzed from codebase structure"
    )

    return f"""# {metadata.name} Documentation

## Project Overview
{metadata.description}

**Repository Details:**
- **Owner:** {metadata.owner}
- **Language:** {metadata.primary_language or UNKNOWN_LANGUAGE}
- **Stars:** {metadata.star_count}
- **Forks:** {metadata.fork_count}
- **Last Updated:** {metadata.last_updated.strftime("%Y-%m-%d")}

## Technology Stack
{stack_text}

## Key Features
{features_text}

## Project Type
{rules.classify_project(snapshot)}"""


def generate_structure(snapshot: RepositorySnapshot) -> str:
    tree_lines = [
        f"├── {entry.name}/" if entry.kind == EntryKind.DIRECTORY else f"├── {entry.name}"
        for entry in snapshot.entries[:TREE_ENTRY_LIMIT]
    ]
    tree_text = "\n".join(tree_lines)
    key_files = [f"**{f.name}** ({f.size_bytes} bytes)" for f in snapshot.files]

    return f"""## Project Structure

```
{tree_text}
```

## File Analysis
**Total Files Analyzed:** {len(snapshot.files)}
**Key Files Identified:**
{_bullets(key_files)}"""


def _module_block(sampled: SampledFile) -> str:
    analysis = analyze_source(sampled)
    lines = [
        f"### {sampled.name}",
        f"**Size:** {sampled.size_bytes} bytes",
        f"**Functions/Methods:** {len(analysis.identifiers)}",
    ]
    if analysis.identifiers:
        lines.append("**Key Functions:**")
        lines.extend(f"- `{name}`" for name in analysis.identifiers[:KEY_ITEM_LIMIT])
    lines.append(f"**Imports:** {len(analysis.imports)}")
    if analysis.imports:
        lines.append("**Dependencies:**")
        lines.extend(f"- {path}" for path in analysis.imports[:KEY_ITEM_LIMIT])
    return "\n".join(lines)


def generate_modules(snapshot: RepositorySnapshot) -> str:
    code_files = [f for f in snapshot.files if f.extension in rules.SCRIPT_EXTENSIONS]
    blocks = [_module_block(f) for f in code_files]
    modules_text = "\n\n".join(blocks) if blocks else "No JavaScript or TypeScript modules were sampled."

    manifest = snapshot.manifest
    if manifest is not None:
        dependency_text = (
            f"**Production Dependencies:** {len(manifest.dependencies)}\n"
            f"**Development Dependencies:** {len(manifest.dev_dependencies)}"
        )
    else:
        dependency_text = "No package.json found; dependency counts are not available."

    return f"""## Core Modules & Components

{modules_text}

## Dependencies Analysis
{dependency_text}"""


def generate_diagram(snapshot: RepositorySnapshot) -> str:
    ui_framework = rules.detect_ui_framework(snapshot.manifest)
    with_data_layer = rules.has_persistence_layer(snapshot.manifest)

    edges: List[Edge]
    if ui_framework is not None:
        edges = [
            (src, src_label, dst, dst_label.format(ui=ui_framework))
            for src, src_label, dst, dst_label in FRONTEND_TOPOLOGY
        ]
        if with_data_layer:
            edges.extend(FRONTEND_DATA_LAYER)
    else:
        edges = list(GENERIC_TOPOLOGY)
        if with_data_layer:
            edges.extend(GENERIC_DATA_LAYER)
    return render_graph(edges)


def generate_installation(snapshot: RepositorySnapshot) -> str:
    metadata = snapshot.metadata
    manifest = snapshot.manifest
    start_command = rules.select_start_command(manifest)

    if manifest is not None:
        prerequisites = "- Node.js (version specified in package.json)\n- npm or yarn package manager"
    else:
        prerequisites = "- Check repository for specific requirements"

    if manifest is not None and manifest.scripts:
        script_lines = _bullets(f"`npm run {name}`: {command}" for name, command in manifest.scripts.items())
        scripts_text = f"Available scripts:\n{script_lines}"
    else:
        scripts_text = "No scripts defined"

    return f"""## Installation

```bash
# Clone the repository
git clone https://github.com/{metadata.owner}/{metadata.name}.git

# Navigate to project directory
cd {metadata.name}

# Install dependencies
{rules.DEFAULT_INSTALL_COMMAND}

# Start the application
{start_command}
```

## Prerequisites
{prerequisites}

## Environment Setup
{scripts_text}"""


def generate_usage(snapshot: RepositorySnapshot) -> str:
    manifest = snapshot.manifest
    main_file = _find_main_file(snapshot.files)

    if main_file is not None:
        entry_text = f"The main entry point is `{main_file.name}`"
    else:
        entry_text = "Analyze the codebase to identify entry points"

    configuration_text = (
        "Configuration options available in package.json"
        if manifest is not None
        else "Check repository for configuration files"
    )

    has_api = any("function" in f.content or "export" in f.content for f in snapshot.files)
    api_text = (
        "Functions and exports detected - refer to individual files for detailed API documentation"
        if has_api
        else "No clear API structure detected"
    )

    if manifest is not None and manifest.dependencies:
        names = list(manifest.dependencies)[:ADVANCED_DEPENDENCY_LIMIT]
        advanced_text = f"This project uses:\n{_bullets(names)}"
    else:
        advanced_text = "Dependencies analyzed from code structure"

    return f"""## Usage

### Quick Start
{entry_text}

### Configuration
{configuration_text}

### API Reference
{api_text}

### Examples
```javascript
// Basic usage example (generated from code analysis)
{rules.select_usage_snippet(snapshot)}
```

### Advanced Features
{advanced_text}"""


def synthesize(snapshot: RepositorySnapshot) -> DocumentationBundle:
    """Builds every documentation section from one repository snapshot."""
    return DocumentationBundle(
        overview=generate_overview(snapshot),
        structure=generate_structure(snapshot),
        modules=generate_modules(snapshot),
        diagram=generate_diagram(snapshot),
        installation=generate_installation(snapshot),
        usage=generate_usage(snapshot),
    )
