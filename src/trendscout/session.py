"""In-memory state shared between trend analysis and script generation."""

import logging

from trendscout.models import ContentIdea, TrendReport

logger = logging.getLogger(__name__)


class Session:
    """State for one interactive session.

    Holds the model credential captured by the latest analysis, the report
    currently on display, and which of its content ideas is selected.
    Passed explicitly to both orchestrators.
    """

    def __init__(self) -> None:
        self.model_credential = ""
        self.language = "English"
        self.report: TrendReport | None = None
        self.selected_index: int | None = None
        self._analysis_counter = 0

    def has_credential(self) -> bool:
        return bool(self.model_credential)

    def remember_credential(self, credential: str, language: str) -> None:
        self.model_credential = credential
        self.language = language

    def begin_analysis(self) -> int:
        """Register a new analysis and return its token."""
        self._analysis_counter += 1
        return self._analysis_counter

    def is_current(self, token: int) -> bool:
        return token == self._analysis_counter

    def publish_report(self, token: int, report: TrendReport) -> bool:
        """Replace the displayed report unless a newer analysis has started.

        Returns False when the result was dropped as stale.
        """
        if not self.is_current(token):
            logger.warning(
                "Dropping result of analysis %d; analysis %d is newer",
                token,
                self._analysis_counter,
            )
            return False
        self.report = report
        self.selected_index = None
        return True

    def select_idea(self, index: int) -> ContentIdea:
        if self.report is None:
            msg = "No report to select an idea from"
            raise IndexError(msg)
        if not 0 <= index < len(self.report.content_ideas):
            msg = (
                f"Idea index {index} out of range "
                f"(report has {len(self.report.content_ideas)} ideas)"
            )
            raise IndexError(msg)
        self.selected_index = index
        return self.report.content_ideas[index]

    def clear_selection(self) -> None:
        self.selected_index = None

    @property
    def selected_idea(self) -> ContentIdea | None:
        if self.report is None or self.selected_index is None:
            return None
        return self.report.content_ideas[self.selected_index]
