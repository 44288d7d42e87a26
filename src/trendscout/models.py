"""Data models for TrendScout."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

CompetitionLevel = Literal["Low", "Medium", "High", "Very High"]

COMPETITION_LEVELS: tuple[str, ...] = ("Low", "Medium", "High", "Very High")

DATE_RANGES: tuple[str, ...] = (
    "this week",
    "this month",
    "last 3 months",
    "this year",
)

VIDEO_DURATIONS: tuple[str, ...] = (
    "any",
    "shorts (under 1 min)",
    "short (1-5 min)",
    "medium (5-15 min)",
    "long (15-30 min)",
    "extended (30+ min)",
    "feature (1h+)",
)


class ScriptStyle(str, Enum):
    """Narrative voice of a generated script."""

    FIRST_PERSON = "first-person"
    THIRD_PERSON = "third-person"
    NARRATION = "narration"
    HOST = "host"


class ScriptFormat(str, Enum):
    """Layout of a generated script."""

    PLAIN = "plain"
    BRACKETED = "bracketed"


class SearchParameters(BaseModel):
    """What the user asked to analyze, plus the credentials to do it."""

    language: str = "English"
    keyword: str
    date_range: str = "this month"
    video_duration: str = "any"
    model_credential: str = ""
    metadata_credential: str | None = None


class TrendTopic(BaseModel):
    """A related sub-topic with its relative strength."""

    topic: str
    score: int


class VideoRecord(BaseModel):
    """A video shown alongside a trend report."""

    title: str
    channel: str
    views: str
    published_date: str
    url: str
    video_id: str = ""
    duration: str

    @property
    def thumbnail_url(self) -> str | None:
        if not self.video_id:
            return None
        return f"https://img.youtube.com/vi/{self.video_id}/mqdefault.jpg"


class ContentIdea(BaseModel):
    """One proposed video concept."""

    title: str
    hook: str = ""
    description: str = ""
    type: str = "Video"


class Source(BaseModel):
    """A web page the model cited while researching."""

    uri: str
    title: str


class TrendReport(BaseModel):
    """The merged result of one trend analysis."""

    model_config = ConfigDict(frozen=True)

    growth_score: int
    competition_level: CompetitionLevel
    summary: str
    trend_topics: list[TrendTopic]
    related_videos: list[VideoRecord]
    content_ideas: list[ContentIdea]
    sources: list[Source] = []


class GeneratedScript(BaseModel):
    """Narration text produced for a content idea."""

    text: str
    idea: ContentIdea
    style: ScriptStyle
    target_length: int
    output_format: ScriptFormat = ScriptFormat.PLAIN

    @property
    def char_count(self) -> int:
        return len(self.text)
