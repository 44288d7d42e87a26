"""Narration script generation for a selected content idea."""

import logging

import anthropic

from trendscout.analysis.claude import call_claude, make_client, message_text
from trendscout.analysis.prompts import build_script_prompt
from trendscout.config import TrendScoutConfig
from trendscout.errors import GenerationError, MissingCredential
from trendscout.languages import placeholder
from trendscout.models import (
    ContentIdea,
    GeneratedScript,
    ScriptFormat,
    ScriptStyle,
)
from trendscout.session import Session

logger = logging.getLogger(__name__)

MIN_LENGTH = 300
MAX_LENGTH = 10_000
_LENGTH_TOLERANCE = 150


def clamp_target_length(target_length: int) -> int:
    """Keep a requested length inside the supported range."""
    clamped = max(MIN_LENGTH, min(MAX_LENGTH, target_length))
    if clamped != target_length:
        logger.warning(
            "Target length %d outside %d-%d, using %d",
            target_length,
            MIN_LENGTH,
            MAX_LENGTH,
            clamped,
        )
    return clamped


def script_length_band(target_length: int) -> tuple[int, int]:
    """Acceptable character range for a script.

    ``1500`` gives ``(1350, 1650)``. Targets below the minimum are raised to
    it first, so the lower bound never exceeds the upper one.
    """
    target = clamp_target_length(target_length)
    return (
        max(MIN_LENGTH, target - _LENGTH_TOLERANCE),
        target + _LENGTH_TOLERANCE,
    )


async def generate_script(
    idea: ContentIdea,
    session: Session,
    target_length: int = 1500,
    style: ScriptStyle = ScriptStyle.NARRATION,
    *,
    output_format: ScriptFormat = ScriptFormat.PLAIN,
    config: TrendScoutConfig | None = None,
    client: anthropic.AsyncAnthropic | None = None,
) -> GeneratedScript:
    """Generate a spoken script for ``idea``.

    Uses the credential and language captured by the session's last
    analysis.

    Raises:
        MissingCredential: No analysis has run in this session yet.
        GenerationError: Claude could not be reached or timed out.
    """
    if not session.has_credential():
        msg = "No API key available; run a trend analysis first"
        raise MissingCredential(msg)
    if config is None:
        config = TrendScoutConfig()
    if client is not None:
        return await _write_script(
            idea, session, target_length, style, output_format, config, client
        )
    async with make_client(session.model_credential) as own_client:
        return await _write_script(
            idea, session, target_length, style, output_format, config, own_client
        )


async def _write_script(
    idea: ContentIdea,
    session: Session,
    target_length: int,
    style: ScriptStyle,
    output_format: ScriptFormat,
    config: TrendScoutConfig,
    client: anthropic.AsyncAnthropic,
) -> GeneratedScript:
    target = clamp_target_length(target_length)
    band = script_length_band(target)
    prompt = build_script_prompt(
        idea, session.language, style, target, band, output_format
    )
    logger.info(
        "Generating %s script for %r (%d-%d chars)",
        style.value,
        idea.title,
        *band,
    )

    try:
        message = await call_claude(
            client,
            prompt,
            config.claude,
            temperature=config.claude.script_temperature,
        )
    except anthropic.APIError as e:
        msg = f"Script generation failed: {e}"
        raise GenerationError(msg) from e
    except TimeoutError as e:
        msg = f"Claude did not answer within {config.claude.timeout_seconds:.0f}s"
        raise GenerationError(msg) from e

    text = message_text(message).strip()
    if not text:
        logger.warning("Claude returned an empty script for %r", idea.title)
        text = placeholder(session.language, "script_failed")

    return GeneratedScript(
        text=text,
        idea=idea,
        style=style,
        target_length=target,
        output_format=output_format,
    )
