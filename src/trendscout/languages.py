"""Language names, placeholders and date formats for report text."""

from datetime import datetime

_LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ko": "Korean",
    "es": "Spanish",
    "ja": "Japanese",
    "fr": "French",
    "de": "German",
    "pt": "Portuguese",
    "it": "Italian",
    "zh": "Chinese",
}

# title, channel, views, published date, duration, summary
_PLACEHOLDERS: dict[str, dict[str, str]] = {
    "English": {
        "title": "(untitled)",
        "channel": "Unknown",
        "views": "-",
        "published_date": "-",
        "duration": "0:00",
        "summary": "Analysis complete.",
        "script_failed": "Script generation returned no text.",
    },
    "Korean": {
        "title": "제목 없음",
        "channel": "정보 없음",
        "views": "-",
        "published_date": "-",
        "duration": "0:00",
        "summary": "분석 완료",
        "script_failed": "대본 생성에 실패했습니다.",
    },
}


def language_name(language: str) -> str:
    """Normalize a language code or label to an English language name.

    Accepts codes (``ko``), names (``Korean``) and labels with a native
    gloss (``Korean (한국어)``).
    """
    cleaned = language.split("(", 1)[0].strip()
    if not cleaned:
        return "English"
    return _LANGUAGE_NAMES.get(cleaned.lower(), cleaned[:1].upper() + cleaned[1:])


def placeholder(language: str, field: str) -> str:
    table = _PLACEHOLDERS.get(language_name(language), _PLACEHOLDERS["English"])
    return table[field]


def format_date(value: datetime, language: str) -> str:
    """Format a date the way the language's default locale shows it."""
    if language_name(language) == "Korean":
        return f"{value.year}. {value.month}. {value.day}."
    return f"{value.month}/{value.day}/{value.year}"
