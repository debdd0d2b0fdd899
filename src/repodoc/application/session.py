import itertools
import logging
from enum import Enum
from typing import Optional

from repodoc.application.analysis_service import AnalysisService
from repodoc.domain.exceptions import AnalyzerException
from repodoc.domain.models import AnalysisReport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AnalysisSession:
    """
    Single owner of the current analysis result and in-progress flag.

    Each start() supersedes whatever run came before it and hands out a new
    run token. Completions carrying an older token are stale: they are ignored
    so a slow earlier run can never overwrite a newer result.
    """

    def __init__(self):
        self._tokens = itertools.count(1)
        self._current_token: Optional[int] = None
        self.state = SessionState.IDLE
        self.report: Optional[AnalysisReport] = None
        self.error: Optional[Exception] = None

    @property
    def is_running(self) -> bool:
        return self.state == SessionState.RUNNING

    def start(self) -> int:
        """Begins a new run, discarding any previous result. Returns the run token."""
        if self.is_running:
            logger.info(f"Run {self._current_token} superseded by a new run.")
        self._current_token = next(self._tokens)
        self.state = SessionState.RUNNING
        self.report = None
        self.error = None
        return self._current_token

    def complete(self, token: int, report: AnalysisReport) -> bool:
        """Records a successful result. Returns False if the run was superseded."""
        if not self._accepts(token):
            return False
        self.state = SessionState.SUCCEEDED
        self.report = report
        return True

    def fail(self, token: int, error: Exception) -> bool:
        """Records a run-level failure. Returns False if the run was superseded."""
        if not self._accepts(token):
            return False
        self.state = SessionState.FAILED
        self.error = error
        return True

    def _accepts(self, token: int) -> bool:
        if token != self._current_token or not self.is_running:
            logger.debug(f"Ignoring stale completion of run {token}.")
            return False
        return True

    async def run(self, service: AnalysisService, url: str) -> Optional[AnalysisReport]:
        """
        Drives one analysis through the lifecycle.

        Returns the report when this run is still current and succeeded, None otherwise.
        Run-level failures are recorded on the session rather than raised.
        Unexpected errors are recorded as well and then re-raised.
        """
        token = self.start()
        try:
            report = await service.analyze(url)
        except AnalyzerException as e:
            self.fail(token, e)
            return None
        except Exception as e:
            self.fail(token, e)
            raise
        if self.complete(token, report):
            return report
        return None
