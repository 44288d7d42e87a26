"""Configuration loading for TrendScout."""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path("~/.config/trendscout/config.toml").expanduser()


@dataclass
class GeneralConfig:
    """Default search constraints."""

    language: str = "English"
    date_range: str = "this month"
    video_duration: str = "any"


@dataclass
class ClaudeConfig:
    """Claude LLM settings."""

    model: str = "claude-sonnet-4-6"
    max_tokens: int = 8192
    analysis_temperature: float = 0.7
    script_temperature: float = 0.8
    web_search_uses: int = 5
    timeout_seconds: float = 120.0


@dataclass
class YouTubeConfig:
    """YouTube Data API settings."""

    max_results: int = 12
    timeout_seconds: float = 15.0


@dataclass
class ScriptConfig:
    """Script generation defaults."""

    target_length: int = 1500
    style: str = "narration"
    output_format: str = "plain"


@dataclass
class TrendScoutConfig:
    """Top-level configuration for TrendScout."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    script: ScriptConfig = field(default_factory=ScriptConfig)


def _apply_section(target: object, data: dict[str, object]) -> None:
    """Apply a dict of values onto a dataclass instance."""
    for key, value in data.items():
        if hasattr(target, key):
            expected_type = type(getattr(target, key))
            if expected_type is int and isinstance(value, str):
                setattr(target, key, int(value))
            elif expected_type is float and isinstance(value, (str, int)):
                setattr(target, key, float(value))
            else:
                setattr(target, key, value)


def _apply_env_overrides(config: TrendScoutConfig) -> None:
    """Override config values from environment variables."""
    env_map: dict[str, tuple[object, str]] = {
        "TRENDSCOUT_LANGUAGE": (config.general, "language"),
        "TRENDSCOUT_DATE_RANGE": (config.general, "date_range"),
        "TRENDSCOUT_VIDEO_DURATION": (config.general, "video_duration"),
        "TRENDSCOUT_CLAUDE_MODEL": (config.claude, "model"),
        "TRENDSCOUT_CLAUDE_MAX_TOKENS": (config.claude, "max_tokens"),
        "TRENDSCOUT_CLAUDE_TIMEOUT": (config.claude, "timeout_seconds"),
        "TRENDSCOUT_YOUTUBE_MAX_RESULTS": (config.youtube, "max_results"),
        "TRENDSCOUT_YOUTUBE_TIMEOUT": (config.youtube, "timeout_seconds"),
        "TRENDSCOUT_SCRIPT_LENGTH": (config.script, "target_length"),
        "TRENDSCOUT_SCRIPT_STYLE": (config.script, "style"),
        "TRENDSCOUT_SCRIPT_FORMAT": (config.script, "output_format"),
    }
    for env_var, (section, attr) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _apply_section(section, {attr: value})


def _config_path() -> Path:
    return Path(
        os.environ.get("TRENDSCOUT_CONFIG", str(_DEFAULT_CONFIG_PATH))
    ).expanduser()


def load_config(path: Path | None = None) -> TrendScoutConfig:
    """Load configuration from TOML file with env var overrides.

    Config file path resolution:
    1. Explicit ``path`` argument
    2. ``TRENDSCOUT_CONFIG`` environment variable
    3. ``~/.config/trendscout/config.toml``
    """
    import tomllib

    config = TrendScoutConfig()
    config_path = (path or _config_path()).expanduser()

    if config_path.exists():
        logger.info("Loading config from %s", config_path)
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        for section_name, section_obj in _sections(config).items():
            if section_name in data and isinstance(data[section_name], dict):
                _apply_section(section_obj, data[section_name])
    else:
        logger.debug("No config file found at %s, using defaults", config_path)

    _apply_env_overrides(config)
    return config


def _sections(config: TrendScoutConfig) -> dict[str, object]:
    return {f.name: getattr(config, f.name) for f in fields(config)}


def set_config_value(key: str, value: str) -> None:
    """Persist one setting to the TOML file.

    ``key`` is ``section.field`` and must name a field of
    :class:`TrendScoutConfig`. Numeric fields are converted before writing,
    so ``claude.max_tokens abc`` is rejected instead of breaking the next
    load.

    Raises:
        ValueError: Unknown section or field, or a value of the wrong type.
    """
    import tomllib

    section, _, attr = key.partition(".")
    if not section or not attr:
        msg = f"Key must be in 'section.key' format, got: {key}"
        raise ValueError(msg)

    sections = _sections(TrendScoutConfig())
    if section not in sections:
        msg = f"Unknown config section {section!r}; expected one of: " + ", ".join(
            sections
        )
        raise ValueError(msg)
    target = sections[section]
    known = [f.name for f in fields(target)]  # type: ignore[arg-type]
    if attr not in known:
        msg = f"Unknown key {attr!r} in [{section}]; expected one of: " + ", ".join(
            known
        )
        raise ValueError(msg)

    try:
        _apply_section(target, {attr: value})
    except ValueError as e:
        msg = f"Invalid value for {key}: {value!r}"
        raise ValueError(msg) from e
    typed_value = getattr(target, attr)

    config_path = _config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, dict[str, object]] = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
        data = {k: dict(v) for k, v in raw.items() if isinstance(v, dict)}

    data.setdefault(section, {})[attr] = typed_value
    _write_toml(config_path, data)
    logger.info("Set %s = %r in %s", key, typed_value, config_path)


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _write_toml(path: Path, data: dict[str, dict[str, object]]) -> None:
    """Write ``{section: {key: value}}`` as TOML tables."""
    lines: list[str] = []
    for section, values in data.items():
        lines.append(f"[{section}]")
        lines.extend(f"{k} = {_toml_value(v)}" for k, v in values.items())
        lines.append("")
    path.write_text("\n".join(lines))
