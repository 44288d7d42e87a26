"""Trend analysis: ask Claude for a report, enrich it with YouTube data."""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import anthropic
import httpx

from trendscout.analysis.claude import (
    answer_text,
    call_claude,
    extract_sources,
    make_client,
)
from trendscout.analysis.parser import ParseFailed, parse_model_json
from trendscout.analysis.prompts import build_analysis_prompt
from trendscout.config import TrendScoutConfig
from trendscout.errors import (
    MissingCredential,
    ModelRequestError,
    ResponseParseError,
)
from trendscout.languages import placeholder
from trendscout.models import (
    COMPETITION_LEVELS,
    ContentIdea,
    SearchParameters,
    Source,
    TrendReport,
    TrendTopic,
    VideoRecord,
)
from trendscout.session import Session
from trendscout.sources.youtube import extract_video_id, search_videos

logger = logging.getLogger(__name__)

_DEFAULT_GROWTH_SCORE = 50
_DEFAULT_COMPETITION = "Medium"
_SEARCH_RESULTS_URL = "https://www.youtube.com/results?search_query="


async def _no_videos() -> list[VideoRecord]:
    return []


async def _fetch_enrichment(
    params: SearchParameters,
    config: TrendScoutConfig,
    http_client: httpx.AsyncClient | None,
) -> list[VideoRecord]:
    """Fetch authoritative videos; any failure means no enrichment."""
    try:
        return await asyncio.wait_for(
            search_videos(
                params.metadata_credential or "",
                params.keyword,
                config.youtube.max_results,
                client=http_client,
                language=params.language,
                timeout=config.youtube.timeout_seconds,
            ),
            timeout=config.youtube.timeout_seconds,
        )
    except TimeoutError:
        logger.warning(
            "YouTube search timed out after %.0fs", config.youtube.timeout_seconds
        )
        return []


def _clamp_score(value: Any, default: int) -> int:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return default
    return max(0, min(100, score))


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_model_video(
    raw: dict[str, Any], keyword: str, language: str
) -> VideoRecord:
    """Turn a model-suggested video into a record with a working link.

    Scheme-less URLs get ``https://``; when no video ID can be recovered the
    link points at a YouTube search for the title (or the keyword).
    """
    url = _text(raw.get("url"))
    if url and not url.startswith("http"):
        url = f"https://{url}"
    video_id = extract_video_id(url)

    title = _text(raw.get("title"))
    if not (url and video_id):
        url = _SEARCH_RESULTS_URL + quote(title or keyword, safe="")

    return VideoRecord(
        title=title or placeholder(language, "title"),
        channel=_text(raw.get("channel")) or placeholder(language, "channel"),
        views=_text(raw.get("views")) or placeholder(language, "views"),
        published_date=(
            _text(raw.get("publishedDate"))
            or placeholder(language, "published_date")
        ),
        url=url,
        video_id=video_id,
        duration=_text(raw.get("duration")) or placeholder(language, "duration"),
    )


def merge_videos(
    params: SearchParameters,
    model_videos: Any,
    metadata_videos: list[VideoRecord],
) -> list[VideoRecord]:
    """Prefer YouTube API results; fall back to the model's suggestions."""
    if params.metadata_credential and metadata_videos:
        return list(metadata_videos)

    if params.metadata_credential:
        logger.info("No YouTube results, using model-suggested videos")
    if not isinstance(model_videos, list):
        return []
    return [
        normalize_model_video(raw, params.keyword, params.language)
        for raw in model_videos
        if isinstance(raw, dict)
    ]


def _topics(raw: Any) -> list[TrendTopic]:
    if not isinstance(raw, list):
        return []
    topics: list[TrendTopic] = []
    for item in raw:
        if isinstance(item, dict) and _text(item.get("topic")):
            topics.append(
                TrendTopic(
                    topic=_text(item["topic"]),
                    score=_clamp_score(item.get("score"), 0),
                )
            )
    return topics


def _ideas(raw: Any) -> list[ContentIdea]:
    if not isinstance(raw, list):
        return []
    ideas: list[ContentIdea] = []
    for item in raw:
        if isinstance(item, dict) and _text(item.get("title")):
            ideas.append(
                ContentIdea(
                    title=_text(item["title"]),
                    hook=_text(item.get("hook")),
                    description=_text(item.get("description")),
                    type=_text(item.get("type")) or "Video",
                )
            )
    return ideas


def build_report(
    document: dict[str, Any],
    params: SearchParameters,
    metadata_videos: list[VideoRecord],
    sources: list[Source],
) -> TrendReport:
    """Assemble a report, defaulting whatever the model left out."""
    competition = _text(document.get("competitionLevel"))
    if competition not in COMPETITION_LEVELS:
        competition = _DEFAULT_COMPETITION

    return TrendReport(
        growth_score=_clamp_score(
            document.get("growthScore"), _DEFAULT_GROWTH_SCORE
        ),
        competition_level=competition,  # type: ignore[arg-type]
        summary=(
            _text(document.get("summary"))
            or placeholder(params.language, "summary")
        ),
        trend_topics=_topics(document.get("trendTopics")),
        related_videos=merge_videos(
            params, document.get("relatedVideos"), metadata_videos
        ),
        content_ideas=_ideas(document.get("contentIdeas")),
        sources=sources,
    )


async def analyze_trends(
    params: SearchParameters,
    session: Session,
    *,
    config: TrendScoutConfig | None = None,
    client: anthropic.AsyncAnthropic | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> TrendReport:
    """Run one trend analysis and publish the report to the session.

    The Claude request and the YouTube search run concurrently. A failing
    YouTube search only removes the enrichment; a failing Claude request
    raises and cancels the search.

    Raises:
        MissingCredential: No model credential was given.
        ModelRequestError: Claude could not be reached or timed out.
        ResponseParseError: Claude's answer held no JSON object.
    """
    if not params.model_credential:
        msg = "A Claude API key is required to analyze trends"
        raise MissingCredential(msg)
    if config is None:
        config = TrendScoutConfig()

    if client is not None:
        return await _run_analysis(params, session, config, client, http_client)
    async with make_client(params.model_credential) as own_client:
        return await _run_analysis(
            params, session, config, own_client, http_client
        )


async def _run_analysis(
    params: SearchParameters,
    session: Session,
    config: TrendScoutConfig,
    client: anthropic.AsyncAnthropic,
    http_client: httpx.AsyncClient | None,
) -> TrendReport:
    session.remember_credential(params.model_credential, params.language)
    token = session.begin_analysis()

    ask_for_videos = not params.metadata_credential
    prompt = build_analysis_prompt(params, ask_for_videos)
    logger.info(
        "Analyzing %r (%s, %s), videos from %s",
        params.keyword,
        params.language,
        params.date_range,
        "model" if ask_for_videos else "YouTube API",
    )

    enrichment = asyncio.ensure_future(
        _fetch_enrichment(params, config, http_client)
        if params.metadata_credential
        else _no_videos()
    )
    try:
        message, metadata_videos = await asyncio.gather(
            call_claude(
                client,
                prompt,
                config.claude,
                temperature=config.claude.analysis_temperature,
                web_search=True,
            ),
            enrichment,
        )
    except anthropic.APIError as e:
        enrichment.cancel()
        msg = f"Claude request failed: {e}"
        raise ModelRequestError(msg) from e
    except TimeoutError as e:
        enrichment.cancel()
        msg = f"Claude did not answer within {config.claude.timeout_seconds:.0f}s"
        raise ModelRequestError(msg) from e

    text = answer_text(message)
    result = parse_model_json(text)
    if isinstance(result, ParseFailed):
        logger.debug("Unparseable model output: %.500s", text)
        msg = f"Could not read the analysis result: {result.reason}"
        raise ResponseParseError(msg)

    report = build_report(
        result.document, params, metadata_videos, extract_sources(message)
    )
    logger.info(
        "Report ready: %d topics, %d videos, %d ideas, %d sources",
        len(report.trend_topics),
        len(report.related_videos),
        len(report.content_ideas),
        len(report.sources),
    )
    session.publish_report(token, report)
    return report
