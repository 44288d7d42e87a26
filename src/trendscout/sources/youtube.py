"""YouTube helpers: URL parsing, display formatting, and Data API search."""

import logging
import re
from datetime import datetime
from typing import Any
from urllib.parse import parse_qs, urlparse

import httpx

from trendscout.languages import format_date
from trendscout.models import VideoRecord

logger = logging.getLogger(__name__)

_API_BASE = "https://www.googleapis.com/youtube/v3"
_DEFAULT_TIMEOUT = 15.0

_VIDEO_ID = re.compile(r"[A-Za-z0-9_-]{11}")
_LOOSE_VIDEO_ID = re.compile(
    r"(?:^|[/.])"
    r"(?:youtu\.be/|youtube(?:-nocookie)?\.com/"
    r".*?(?:v/|u/\w/|embed/|shorts/|watch\?v=|[?&]v=))"
    r"([^#&?/]*)",
    re.IGNORECASE,
)
_YOUTUBE_HOSTS = ("youtube.com", "youtube-nocookie.com", "youtu.be")
_ISO_DURATION = re.compile(
    r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?"
)


def _valid_id(candidate: str) -> str:
    return candidate if _VIDEO_ID.fullmatch(candidate) else ""


def _is_host(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def extract_video_id(url: str) -> str:
    """Extract the 11-character video ID from a YouTube URL.

    Parses the URL properly first (``youtu.be/<id>`` or ``youtube.com/...?v=<id>``)
    and falls back to a pattern scan for embed, shorts and mangled URLs.
    Links to any other site, and IDs that are not 11 characters of
    ``[A-Za-z0-9_-]``, give an empty string.
    """
    if not url:
        return ""
    url = url.strip()
    candidate = url if url.startswith("http") else f"https://{url}"

    try:
        parsed = urlparse(candidate)
        host = (parsed.hostname or "").lower()
    except ValueError:
        logger.debug("Could not parse URL %r, trying pattern scan", url)
    else:
        if _is_host(host, "youtu.be"):
            video_id = _valid_id(parsed.path.lstrip("/").split("/", 1)[0])
            if video_id:
                return video_id
        elif _is_host(host, "youtube.com"):
            video_id = _valid_id(parse_qs(parsed.query).get("v", [""])[0])
            if video_id:
                return video_id
        elif "." in host and not any(_is_host(host, d) for d in _YOUTUBE_HOSTS):
            return ""

    match = _LOOSE_VIDEO_ID.search(url)
    return _valid_id(match.group(1)) if match else ""


def parse_duration(iso_duration: str) -> str:
    """Convert an ISO 8601 duration (``PT1H2M10S``) to ``1:02:10``."""
    match = _ISO_DURATION.fullmatch(iso_duration or "")
    if not match or iso_duration in ("P", "PT"):
        return "0:00"

    days, hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    hours += days * 24
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_views(view_count: str) -> str:
    """Compact a raw view count: ``1500`` -> ``1.5K``, ``2500000`` -> ``2.5M``."""
    try:
        num = int(view_count)
    except (TypeError, ValueError):
        return view_count

    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def format_published_date(published_at: str, language: str = "English") -> str:
    """Render an RFC 3339 timestamp as a locale date string."""
    try:
        value = datetime.fromisoformat(published_at.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return published_at
    return format_date(value, language)


def _section(item: dict[str, Any], name: str) -> dict[str, Any]:
    value = item.get(name)
    return value if isinstance(value, dict) else {}


def _items(payload: Any) -> list[dict[str, Any]]:
    """Return the dict entries of a Data API list response."""
    if not isinstance(payload, dict):
        msg = f"expected a JSON object, got {type(payload).__name__}"
        raise ValueError(msg)
    items = payload.get("items") or []
    if not isinstance(items, list):
        msg = f"expected a list of items, got {type(items).__name__}"
        raise ValueError(msg)
    return [item for item in items if isinstance(item, dict)]


def _to_record(item: dict[str, Any], language: str) -> VideoRecord:
    snippet = _section(item, "snippet")
    stats = _section(item, "statistics")
    details = _section(item, "contentDetails")
    video_id = item["id"]
    return VideoRecord(
        title=snippet.get("title", ""),
        channel=snippet.get("channelTitle", ""),
        views=format_views(stats.get("viewCount", "0")),
        published_date=format_published_date(
            snippet.get("publishedAt", ""), language
        ),
        url=f"https://www.youtube.com/watch?v={video_id}",
        video_id=video_id,
        duration=parse_duration(details.get("duration", "")),
    )


async def _fetch_videos(
    client: httpx.AsyncClient,
    api_key: str,
    keyword: str,
    max_results: int,
    language: str,
) -> list[VideoRecord]:
    search = await client.get(
        f"{_API_BASE}/search",
        params={
            "part": "snippet",
            "q": keyword,
            "type": "video",
            "maxResults": max_results,
            "key": api_key,
        },
    )
    search.raise_for_status()
    video_ids = [
        item["id"]["videoId"]
        for item in _items(search.json())
        if isinstance(item.get("id"), dict) and item["id"].get("videoId")
    ]
    if not video_ids:
        return []

    details = await client.get(
        f"{_API_BASE}/videos",
        params={
            "part": "snippet,contentDetails,statistics",
            "id": ",".join(video_ids),
            "key": api_key,
        },
    )
    details.raise_for_status()

    # Detail lookups are not guaranteed to keep search ranking order.
    by_id = {item.get("id"): item for item in _items(details.json())}
    return [
        _to_record(by_id[video_id], language)
        for video_id in video_ids
        if video_id in by_id
    ]


async def search_videos(
    api_key: str,
    keyword: str,
    max_results: int = 12,
    *,
    client: httpx.AsyncClient | None = None,
    language: str = "English",
    timeout: float = _DEFAULT_TIMEOUT,
) -> list[VideoRecord]:
    """Search YouTube and return normalized records in relevance order.

    Never raises: API errors, transport failures and malformed payloads are
    logged and produce an empty list, the same as a search with no hits.
    """
    try:
        if client is not None:
            videos = await _fetch_videos(
                client, api_key, keyword, max_results, language
            )
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                videos = await _fetch_videos(
                    own_client, api_key, keyword, max_results, language
                )
    except httpx.HTTPStatusError as e:
        logger.warning(
            "YouTube API error %d: %s",
            e.response.status_code,
            e.response.text[:200],
        )
        return []
    except httpx.HTTPError as e:
        logger.warning("YouTube request failed: %s", e)
        return []
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Unexpected YouTube API payload: %s", e)
        return []

    logger.info("YouTube returned %d videos for %r", len(videos), keyword)
    return videos
