"""Prompt templates for trend analysis and script generation."""

from trendscout.languages import language_name
from trendscout.models import (
    ContentIdea,
    ScriptFormat,
    ScriptStyle,
    SearchParameters,
)

IDEA_COUNT = 8
TOPIC_COUNT = 5
VIDEO_COUNT = 12

_ANALYSIS_PROMPT = """You are a YouTube trend expert. Analyze the current \
trends for the keyword "{keyword}" in the language "{language}" considering \
the timeframe "{date_range}" and videos of length "{video_duration}".
{search_instruction}
Return the result strictly as a JSON object (optionally inside a ```json \
code block) and nothing else. Write "summary" and every "contentIdeas" field \
in {language}.

{{
  "growthScore": number (0-100),
  "competitionLevel": string ("Low", "Medium", "High", "Very High"),
  "summary": string (a concise paragraph summarizing the trend),
  "trendTopics": [ {{"topic": string, "score": number (0-100)}} ] \
(top {topic_count} related sub-topics),
  {video_instruction}
  "contentIdeas": [
    {{"title": string, "hook": string, "description": string, "type": string}}
  ] (exactly {idea_count} viral content ideas based on the analysis)
}}"""

_VIDEO_SEARCH_INSTRUCTION = """
Use web search to find REAL, existing YouTube videos.
"""

_VIDEOS_REQUESTED = """"relatedVideos": [
    {{
      "title": string,
      "channel": string,
      "views": string,
      "publishedDate": string,
      "url": string (must be a valid https://www.youtube.com/watch?v= link \
found via search),
      "duration": string
    }}
  ] (find {video_count} real trending videos via web search),"""

_VIDEOS_SUPPLIED = (
    '"relatedVideos": [] (leave empty, videos are supplied separately),'
)

_STYLE_INSTRUCTIONS = {
    ScriptStyle.FIRST_PERSON: (
        "First person, like a vlogger telling the audience what they "
        "experienced themselves."
    ),
    ScriptStyle.THIRD_PERSON: (
        "Third person, an observer presenting the facts objectively."
    ),
    ScriptStyle.NARRATION: (
        "Voice-over narration that explains what is on screen and delivers "
        "information clearly."
    ),
    ScriptStyle.HOST: (
        "An energetic show host speaking directly to the audience."
    ),
}

SCRIPT_PARTS = ("Hook", "Setup", "Development", "Twist", "Resolution")

_SCRIPT_PROMPT = """You are a professional YouTube script writer.
Write a pure spoken script (narration or dialogue ONLY) in {language}.

### Input
- Title: {title}
- Hook idea: {hook}
- Description: {description}
- Style: {style}
- Target length: {target_length} characters (strict range: {min_len} ~ \
{max_len})

### Structure (5 parts, separated by blank lines)
1. Hook: open with a shocking fact, a provocative question or a \
counter-intuitive statement, and hint at a twist that is revealed later.
2. Setup: introduce the topic and why it matters now.
3. Development: the core content with detail, stories or examples. This is \
the longest part.
4. Twist: a surprising insight, a hidden tip, or a reversal of a common \
belief ("Most people think X, but actually Y").
5. Resolution: summarize the key points and end with a clear call to action \
(subscribe, like, check the description).

### Formatting rules (strict)
- Output ONLY the spoken {language} text.
- Do NOT use scene cues such as [Visual], (Audio) or <Cut to>.
{format_rule}
- Keep the total length within {min_len} ~ {max_len} characters."""

_FORMAT_RULES = {
    ScriptFormat.PLAIN: (
        '- Do NOT use headers such as "### Hook" or "Part 1"; write plain '
        "paragraphs to be read aloud."
    ),
    ScriptFormat.BRACKETED: (
        "- Start each part with its header on its own line, exactly: "
        + ", ".join(f"[{part}]" for part in SCRIPT_PARTS)
        + ". Headers are not counted towards the length."
    ),
}


def build_analysis_prompt(params: SearchParameters, ask_for_videos: bool) -> str:
    """Build the trend analysis prompt.

    When ``ask_for_videos`` is False the model is told to leave its video list
    empty because authoritative metadata is fetched separately.
    """
    language = language_name(params.language)
    if ask_for_videos:
        video_instruction = _VIDEOS_REQUESTED.format(video_count=VIDEO_COUNT)
        search_instruction = _VIDEO_SEARCH_INSTRUCTION
    else:
        video_instruction = _VIDEOS_SUPPLIED
        search_instruction = ""

    return _ANALYSIS_PROMPT.format(
        keyword=params.keyword,
        language=language,
        date_range=params.date_range,
        video_duration=params.video_duration,
        search_instruction=search_instruction,
        video_instruction=video_instruction,
        topic_count=TOPIC_COUNT,
        idea_count=IDEA_COUNT,
    )


def build_script_prompt(
    idea: ContentIdea,
    language: str,
    style: ScriptStyle,
    target_length: int,
    band: tuple[int, int],
    output_format: ScriptFormat = ScriptFormat.PLAIN,
) -> str:
    """Build the narration script prompt for one content idea."""
    min_len, max_len = band
    return _SCRIPT_PROMPT.format(
        language=language_name(language),
        title=idea.title,
        hook=idea.hook or "-",
        description=idea.description or "-",
        style=_STYLE_INSTRUCTIONS[style],
        target_length=target_length,
        min_len=min_len,
        max_len=max_len,
        format_rule=_FORMAT_RULES[output_format],
    )
