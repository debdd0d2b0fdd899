from typing import Optional


class AnalyzerException(Exception):
    """Base exception for all repository analysis errors."""
    pass

class InvalidUrlException(AnalyzerException):
    """Raised when the input cannot be resolved to an owner/name pair."""
    def __init__(self, url: str, message: str = "Please enter a valid repository URL."):
        self.url = url
        super().__init__(f"{message} Got: {url!r}")

class RepositoryNotFoundException(AnalyzerException):
    """Raised when a repository is missing, private or otherwise inaccessible."""
    def __init__(self, full_name: str, message: str = "Repository not found or is private."):
        self.full_name = full_name
        super().__init__(f"{message} ({full_name})")

class FetchException(AnalyzerException):
    """Raised when a single request to the data source does not succeed."""
    def __init__(self, url: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        detail = f"HTTP {status}" if status is not None else "no response"
        super().__init__(f"Failed to fetch {url} ({detail}).")

class RateLimitExceededException(AnalyzerException):
    """Raised when the GitHub REST rate limit is exhausted."""
    def __init__(self, reset_at: str, message: str = "GitHub API rate limit exceeded."):
        self.reset_at = reset_at
        super().__init__(f"{message} Resets at: {reset_at}")

class InvalidManifestException(AnalyzerException):
    """Raised when a manifest payload cannot be decoded into structured data."""
    pass
