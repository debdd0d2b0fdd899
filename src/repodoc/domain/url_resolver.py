import re

from repodoc.domain.exceptions import InvalidUrlException
from repodoc.domain.models import RepositoryIdentifier

# <scheme>://<user>@github.com[:port]/<owner>/<name>, scheme, user, www. and port optional.
# Only github.com is accepted. Look-alikes such as evilgithub.com do not match.
# SSH remotes separate host and owner with ':' instead of '/'.
REPOSITORY_URL_PATTERN = re.compile(
    r"(?:[a-z][a-z0-9+.-]*://)?"
    r"(?:[^@/\s]+@)?"
    r"(?:^|(?<=//)|(?<=@)|(?<=\s))(?:www\.)?github\.com(?::\d+)?"
    r"[/:](?P<owner>[\w.-]+)/(?P<name>[\w.-]+)",
    re.IGNORECASE,
)
GIT_SUFFIX = ".git"


def resolve_repository_url(url: str) -> RepositoryIdentifier:
    """
    Extracts the repository identifier from a free-text URL.

    Raises:
        InvalidUrlException: If the input is blank or has no github.com/<owner>/<name> path.
    """
    if not url or not url.strip():
        raise InvalidUrlException(url or "")

    match = REPOSITORY_URL_PATTERN.search(url.strip())
    if not match:
        raise InvalidUrlException(url)

    name = match.group("name")
    if name.endswith(GIT_SUFFIX):
        name = name[: -len(GIT_SUFFIX)]
    if not name:
        raise InvalidUrlException(url)

    return RepositoryIdentifier(owner=match.group("owner"), name=name)
