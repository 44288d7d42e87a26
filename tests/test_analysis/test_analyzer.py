"""Tests for trend analysis orchestration."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest
import respx
from conftest import analysis_document, analysis_json, make_client, make_message

from trendscout.analysis.analyzer import (
    analyze_trends,
    build_report,
    normalize_model_video,
)
from trendscout.config import TrendScoutConfig
from trendscout.errors import MissingCredential, ModelRequestError, ResponseParseError
from trendscout.models import SearchParameters, VideoRecord
from trendscout.session import Session

_SEARCH_VIDEOS = "trendscout.analysis.analyzer.search_videos"


def _api_video(i: int) -> VideoRecord:
    video_id = f"realvideo{i:02d}"
    return VideoRecord(
        title=f"Real {i}",
        channel="Real Channel",
        views="2.5M",
        published_date="3/15/2024",
        url=f"https://www.youtube.com/watch?v={video_id}",
        video_id=video_id,
        duration="12:00",
    )


def _connection_error() -> anthropic.APIConnectionError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    return anthropic.APIConnectionError(request=request)


class TestNormalizeModelVideo:
    def test_valid_url_kept(self) -> None:
        video = normalize_model_video(
            {"title": "T", "url": "https://youtu.be/dQw4w9WgXcQ"}, "kw", "English"
        )
        assert video.url == "https://youtu.be/dQw4w9WgXcQ"
        assert video.video_id == "dQw4w9WgXcQ"

    def test_scheme_added(self) -> None:
        video = normalize_model_video(
            {"title": "T", "url": "www.youtube.com/watch?v=dQw4w9WgXcQ"},
            "kw",
            "English",
        )
        assert video.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert video.video_id == "dQw4w9WgXcQ"

    def test_unusable_url_becomes_search_link(self) -> None:
        video = normalize_model_video(
            {"title": "Best ETFs 2025", "url": "#"}, "kw", "English"
        )
        assert video.video_id == ""
        assert video.url == (
            "https://www.youtube.com/results?search_query=Best%20ETFs%202025"
        )

    def test_missing_title_searches_keyword(self) -> None:
        video = normalize_model_video({}, "stock investing", "English")
        assert video.url.endswith("search_query=stock%20investing")
        assert video.title == "(untitled)"
        assert video.channel == "Unknown"
        assert video.views == "-"
        assert video.published_date == "-"
        assert video.duration == "0:00"

    def test_korean_placeholders(self) -> None:
        video = normalize_model_video({}, "주식", "Korean (한국어)")
        assert video.title == "제목 없음"
        assert video.channel == "정보 없음"


class TestBuildReport:
    def test_defaults_for_empty_document(self, params: SearchParameters) -> None:
        report = build_report({}, params, [], [])
        assert report.growth_score == 50
        assert report.competition_level == "Medium"
        assert report.summary == "Analysis complete."
        assert report.trend_topics == []
        assert report.related_videos == []
        assert report.content_ideas == []
        assert report.sources == []

    def test_bad_values_fall_back(self, params: SearchParameters) -> None:
        document = {
            "growthScore": "lots",
            "competitionLevel": "Insane",
            "trendTopics": "nope",
            "contentIdeas": [{"title": "Only title"}, "garbage", {"hook": "no title"}],
            "relatedVideos": [None, {"title": "T", "url": "bad"}],
        }
        report = build_report(document, params, [], [])
        assert report.growth_score == 50
        assert report.competition_level == "Medium"
        assert report.trend_topics == []
        assert len(report.content_ideas) == 1
        assert report.content_ideas[0].type == "Video"
        assert len(report.related_videos) == 1

    def test_scores_are_clamped(self, params: SearchParameters) -> None:
        document = {
            "growthScore": 140,
            "trendTopics": [{"topic": "a", "score": -5}, {"topic": "b", "score": 55.6}],
        }
        report = build_report(document, params, [], [])
        assert report.growth_score == 100
        assert [t.score for t in report.trend_topics] == [0, 56]


class TestAnalyzeTrends:
    @pytest.mark.asyncio
    async def test_end_to_end_without_metadata_key(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(make_message(analysis_json()))
        with patch(_SEARCH_VIDEOS, new_callable=AsyncMock) as mock_search:
            report = await analyze_trends(params, session, client=client)

        assert len(report.content_ideas) == 8
        assert len(report.related_videos) == 12
        assert all(video.url for video in report.related_videos)
        assert report.growth_score == 72
        assert report.competition_level == "High"
        assert len(report.trend_topics) == 5
        mock_search.assert_not_called()
        assert session.report is report
        assert session.model_credential == "x"

    @pytest.mark.asyncio
    async def test_missing_credential_makes_no_calls(self, session: Session) -> None:
        params = SearchParameters(keyword="stock investing", model_credential="")
        client = make_client()
        with patch(_SEARCH_VIDEOS, new_callable=AsyncMock) as mock_search:
            with pytest.raises(MissingCredential):
                await analyze_trends(params, session, client=client)

        assert client.messages.create.call_count == 0
        mock_search.assert_not_called()
        assert not session.has_credential()

    @pytest.mark.asyncio
    async def test_metadata_results_replace_model_videos(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        api_videos = [_api_video(i) for i in range(3)]
        client = make_client(make_message(analysis_json()))
        with patch(_SEARCH_VIDEOS, new_callable=AsyncMock) as mock_search:
            mock_search.return_value = api_videos
            report = await analyze_trends(params, session, client=client)

        assert report.related_videos == api_videos
        assert mock_search.call_args.args[:3] == ("yt-key", "stock investing", 12)

    @pytest.mark.asyncio
    async def test_metadata_key_tells_model_to_skip_videos(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        client = make_client(make_message(analysis_json()))
        with patch(_SEARCH_VIDEOS, new_callable=AsyncMock) as mock_search:
            mock_search.return_value = [_api_video(0)]
            await analyze_trends(params, session, client=client)

        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "leave empty" in prompt

    @pytest.mark.asyncio
    async def test_empty_metadata_falls_back_to_model_videos(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        client = make_client(make_message(analysis_json(video_count=4)))
        with patch(_SEARCH_VIDEOS, new_callable=AsyncMock) as mock_search:
            mock_search.return_value = []
            report = await analyze_trends(params, session, client=client)

        assert [v.title for v in report.related_videos] == [
            "Video 0",
            "Video 1",
            "Video 2",
            "Video 3",
        ]

    @pytest.mark.asyncio
    async def test_metadata_timeout_degrades(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        client = make_client(make_message(analysis_json(video_count=2)))
        with patch(_SEARCH_VIDEOS, new_callable=AsyncMock) as mock_search:
            mock_search.side_effect = TimeoutError
            report = await analyze_trends(params, session, client=client)

        assert len(report.related_videos) == 2

    @pytest.mark.asyncio
    async def test_unparseable_response(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(make_message("Sorry, I cannot help with that."))
        with pytest.raises(ResponseParseError):
            await analyze_trends(params, session, client=client)
        assert session.report is None

    @pytest.mark.asyncio
    async def test_plain_json_response(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(make_message(json.dumps(analysis_document())))
        report = await analyze_trends(params, session, client=client)
        assert len(report.content_ideas) == 8

    @pytest.mark.asyncio
    async def test_model_failure_raises(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(_connection_error())
        with pytest.raises(ModelRequestError, match="Claude request failed"):
            await analyze_trends(params, session, client=client)
        # The credential is kept even though the attempt failed.
        assert session.model_credential == "x"

    @pytest.mark.asyncio
    async def test_model_timeout_raises(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(TimeoutError())
        with pytest.raises(ModelRequestError, match="did not answer"):
            await analyze_trends(
                params, session, client=client, config=TrendScoutConfig()
            )

    @pytest.mark.asyncio
    async def test_sources_are_attached(
        self, params: SearchParameters, session: Session
    ) -> None:
        search_block = SimpleNamespace(
            type="web_search_tool_result",
            content=[SimpleNamespace(url="https://news.example", title="News")],
        )
        client = make_client(make_message(analysis_json(), [search_block]))
        report = await analyze_trends(params, session, client=client)
        assert [s.uri for s in report.sources] == ["https://news.example"]

    @pytest.mark.asyncio
    async def test_new_analysis_resets_selection(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(
            make_message(analysis_json()), make_message(analysis_json())
        )
        first = await analyze_trends(params, session, client=client)
        assert session.select_idea(3) == first.content_ideas[3]

        await analyze_trends(params, session, client=client)
        assert session.selected_index is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_malformed_metadata_payload_keeps_model_videos(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        respx.get(host="www.googleapis.com", path="/youtube/v3/search").mock(
            return_value=httpx.Response(200, json=[])
        )
        client = make_client(make_message(analysis_json(video_count=2)))

        report = await analyze_trends(params, session, client=client)

        assert [v.title for v in report.related_videos] == ["Video 0", "Video 1"]
        assert session.report is report

    @pytest.mark.asyncio
    async def test_narration_before_search_is_ignored(
        self, params: SearchParameters, session: Session
    ) -> None:
        message = SimpleNamespace(
            content=[
                SimpleNamespace(
                    type="text",
                    text="I'll search for current trends.",
                    citations=None,
                ),
                SimpleNamespace(type="server_tool_use", name="web_search"),
                SimpleNamespace(type="web_search_tool_result", content=[]),
                SimpleNamespace(
                    type="text",
                    text=json.dumps(analysis_document()),
                    citations=None,
                ),
            ]
        )
        client = make_client(message)

        report = await analyze_trends(params, session, client=client)

        assert report.growth_score == 72
        assert len(report.content_ideas) == 8

    @pytest.mark.asyncio
    async def test_model_and_metadata_calls_overlap(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        model_started = asyncio.Event()
        search_started = asyncio.Event()

        async def _create(**kwargs):
            model_started.set()
            await search_started.wait()
            return make_message(analysis_json())

        async def _search(*args, **kwargs):
            search_started.set()
            await model_started.wait()
            return [_api_video(0)]

        client = MagicMock()
        client.messages.create = AsyncMock(side_effect=_create)
        with patch(_SEARCH_VIDEOS, new=AsyncMock(side_effect=_search)):
            # Sequential calls would wait on each other forever.
            report = await asyncio.wait_for(
                analyze_trends(params, session, client=client), timeout=5
            )

        assert report.related_videos == [_api_video(0)]

    @pytest.mark.asyncio
    async def test_model_failure_cancels_metadata_search(
        self, params: SearchParameters, session: Session
    ) -> None:
        params = params.model_copy(update={"metadata_credential": "yt-key"})
        search_started = asyncio.Event()
        search_cancelled = asyncio.Event()

        async def _create(**kwargs):
            await search_started.wait()
            raise _connection_error()

        async def _search(*args, **kwargs):
            search_started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                search_cancelled.set()
                raise
            return []

        client = MagicMock()
        client.messages.create = AsyncMock(side_effect=_create)
        with patch(_SEARCH_VIDEOS, new=AsyncMock(side_effect=_search)):
            with pytest.raises(ModelRequestError):
                await analyze_trends(params, session, client=client)
            await asyncio.wait_for(search_cancelled.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_own_client_is_closed(
        self, params: SearchParameters, session: Session
    ) -> None:
        client = make_client(make_message(analysis_json()))
        client.__aenter__.return_value = client
        with patch(
            "trendscout.analysis.analyzer.make_client", return_value=client
        ) as mock_make:
            await analyze_trends(params, session)

        mock_make.assert_called_once_with("x")
        client.__aexit__.assert_awaited_once()
