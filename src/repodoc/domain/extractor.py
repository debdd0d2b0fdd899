"""
Pattern-based extraction of identifiers and import targets from source text.

This is regex scanning, not parsing: comments, strings and unusual formatting
can produce false positives or hide real declarations. Callers treat the
results as a best-effort summary.
"""
import re
from typing import List, NamedTuple

from repodoc.domain.models import SampledFile

# function foo | const foo = | foo: function
IDENTIFIER_PATTERN = re.compile(
    r"function\s+(\w+)|const\s+(\w+)\s*=|(\w+)\s*:\s*function"
)
IMPORT_PATTERN = re.compile(r"""import.+from\s+['"]([^'"]+)['"]""")


class SourceAnalysis(NamedTuple):
    identifiers: List[str]
    imports: List[str]


def extract_identifiers(text: str) -> List[str]:
    """Returns declared identifiers in first-match order, duplicates retained."""
    identifiers = []
    for match in IDENTIFIER_PATTERN.finditer(text):
        name = next((group for group in match.groups() if group), None)
        if name:
            identifiers.append(name)
    return identifiers


def extract_imports(text: str) -> List[str]:
    """Returns the quoted module paths of import statements in appearance order."""
    return [match.group(1) for match in IMPORT_PATTERN.finditer(text)]


def analyze_source(sampled_file: SampledFile) -> SourceAnalysis:
    return SourceAnalysis(
        identifiers=extract_identifiers(sampled_file.content),
        imports=extract_imports(sampled_file.content),
    )
