"""Thin async wrapper around the Claude Messages API."""

import asyncio
import logging
from typing import Any

import anthropic

from trendscout.config import ClaudeConfig
from trendscout.models import Source

logger = logging.getLogger(__name__)

_WEB_SEARCH_TOOL = "web_search_20250305"


def make_client(api_key: str) -> anthropic.AsyncAnthropic:
    return anthropic.AsyncAnthropic(api_key=api_key)


async def call_claude(
    client: anthropic.AsyncAnthropic,
    prompt: str,
    config: ClaudeConfig,
    *,
    temperature: float,
    web_search: bool = False,
) -> Any:
    """Send one user prompt and return the raw message.

    Raises ``anthropic.APIError`` or ``TimeoutError``; callers map these to
    their own error types. There is no retry: a failed generation is
    reported, not repeated.
    """
    kwargs: dict[str, Any] = {
        "model": config.model,
        "max_tokens": config.max_tokens,
        "temperature": temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    if web_search:
        kwargs["tools"] = [
            {
                "type": _WEB_SEARCH_TOOL,
                "name": "web_search",
                "max_uses": config.web_search_uses,
            }
        ]

    logger.debug(
        "Calling %s (web_search=%s, %d prompt chars)",
        config.model,
        web_search,
        len(prompt),
    )
    return await asyncio.wait_for(
        client.messages.create(**kwargs),
        timeout=config.timeout_seconds,
    )


def _joined_text(blocks: list[Any]) -> str:
    return "".join(
        block.text for block in blocks if getattr(block, "type", None) == "text"
    )


def message_text(message: Any) -> str:
    """Concatenate the text blocks of a message."""
    return _joined_text(list(getattr(message, "content", None) or []))


_SERVER_TOOL_BLOCKS = ("server_tool_use", "web_search_tool_result")


def answer_text(message: Any) -> str:
    """Return the text written after the last web search.

    Claude often narrates before searching ("I'll look up..."); only the
    text that follows the final search holds the answer. Messages without
    a search fall back to all of their text.
    """
    blocks = list(getattr(message, "content", None) or [])
    last_tool = max(
        (
            i
            for i, block in enumerate(blocks)
            if getattr(block, "type", None) in _SERVER_TOOL_BLOCKS
        ),
        default=-1,
    )
    answer = _joined_text(blocks[last_tool + 1 :])
    return answer if answer.strip() else _joined_text(blocks)


def extract_sources(message: Any) -> list[Source]:
    """Collect the web pages a message searched or cited, de-duplicated by URL.

    A message without search results yields an empty list.
    """
    sources: list[Source] = []
    seen: set[str] = set()

    def _add(url: str | None, title: str | None) -> None:
        if not url or url in seen:
            return
        seen.add(url)
        sources.append(Source(uri=url, title=title or url))

    for block in getattr(message, "content", None) or []:
        block_type = getattr(block, "type", None)
        if block_type == "web_search_tool_result":
            results = getattr(block, "content", None)
            # An error result is a single object rather than a list.
            if isinstance(results, list):
                for result in results:
                    _add(getattr(result, "url", None), getattr(result, "title", None))
        elif block_type == "text":
            for citation in getattr(block, "citations", None) or []:
                _add(getattr(citation, "url", None), getattr(citation, "title", None))
    return sources
