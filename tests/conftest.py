"""Shared test fixtures."""

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from trendscout.config import TrendScoutConfig
from trendscout.models import ContentIdea, SearchParameters, TrendReport
from trendscout.session import Session


def make_message(text: str, extra_blocks: list[Any] | None = None) -> SimpleNamespace:
    """Build an object shaped like an Anthropic Messages API response."""
    blocks = list(extra_blocks or [])
    blocks.append(SimpleNamespace(type="text", text=text, citations=None))
    return SimpleNamespace(content=blocks)


def make_client(*responses: Any) -> MagicMock:
    """A fake AsyncAnthropic whose ``messages.create`` returns/raises in order."""
    client = MagicMock()
    client.messages.create = AsyncMock(side_effect=list(responses))
    return client


def analysis_document(idea_count: int = 8, video_count: int = 12) -> dict[str, Any]:
    return {
        "growthScore": 72,
        "competitionLevel": "High",
        "summary": "Stock investing content is growing steadily.",
        "trendTopics": [
            {"topic": f"Topic {i}", "score": 90 - i * 10} for i in range(5)
        ],
        "relatedVideos": [
            {
                "title": f"Video {i}",
                "channel": f"Channel {i}",
                "views": "1.2M",
                "publishedDate": "2 weeks ago",
                "url": f"https://www.youtube.com/watch?v=abcdefghi{i:02d}",
                "duration": "10:01",
            }
            for i in range(video_count)
        ],
        "contentIdeas": [
            {
                "title": f"Idea {i}",
                "hook": f"Hook {i}",
                "description": f"Description {i}",
                "type": "Shorts",
            }
            for i in range(idea_count)
        ],
    }


def analysis_json(**kwargs: Any) -> str:
    return f"```json\n{json.dumps(analysis_document(**kwargs))}\n```"


@pytest.fixture
def tmp_config_path(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def default_config() -> TrendScoutConfig:
    """Return a default config instance."""
    return TrendScoutConfig()


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def params() -> SearchParameters:
    return SearchParameters(
        keyword="stock investing",
        language="English",
        model_credential="x",
    )


@pytest.fixture
def report() -> TrendReport:
    return TrendReport(
        growth_score=60,
        competition_level="Medium",
        summary="A summary.",
        trend_topics=[],
        related_videos=[],
        content_ideas=[
            ContentIdea(title="First", hook="h1", description="d1"),
            ContentIdea(title="Second", hook="h2", description="d2"),
        ],
    )
