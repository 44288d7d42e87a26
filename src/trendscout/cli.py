"""CLI commands for TrendScout."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from trendscout.config import TrendScoutConfig, load_config, set_config_value
from trendscout.errors import ModelRequestError, TrendScoutError
from trendscout.models import (
    GeneratedScript,
    ScriptFormat,
    ScriptStyle,
    SearchParameters,
    TrendReport,
)
from trendscout.session import Session

app = typer.Typer(
    name="trendscout",
    help="Analyze YouTube trends for a keyword and draft video scripts.",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage configuration.")
app.add_typer(config_app, name="config")

console = Console()
logger = logging.getLogger(__name__)


def _get_config() -> TrendScoutConfig:
    return load_config()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_report(report: TrendReport, keyword: str) -> None:
    console.print(f"\n[bold]Trend report: {escape(keyword)}[/bold]")
    console.print(
        f"Growth score: [cyan]{report.growth_score}[/cyan]/100   "
        f"Competition: [cyan]{report.competition_level}[/cyan]\n"
    )
    console.print(escape(report.summary))

    if report.trend_topics:
        table = Table(title="Trending Topics")
        table.add_column("Topic", style="bold")
        table.add_column("Score", justify="right")
        for topic in report.trend_topics:
            table.add_row(escape(topic.topic), str(topic.score))
        console.print(table)

    if report.related_videos:
        table = Table(title="Related Videos")
        table.add_column("Title", style="bold")
        table.add_column("Channel")
        table.add_column("Views", justify="right")
        table.add_column("Published")
        table.add_column("Length", justify="right")
        table.add_column("URL", style="dim")
        for video in report.related_videos:
            table.add_row(
                escape(video.title),
                escape(video.channel),
                video.views,
                video.published_date,
                video.duration,
                video.url,
            )
        console.print(table)

    if report.content_ideas:
        table = Table(title="Content Ideas")
        table.add_column("#", style="dim")
        table.add_column("Title", style="bold")
        table.add_column("Type")
        table.add_column("Hook")
        for i, idea in enumerate(report.content_ideas, start=1):
            table.add_row(
                str(i), escape(idea.title), escape(idea.type), escape(idea.hook)
            )
        console.print(table)

    if report.sources:
        console.print("\n[bold]Sources[/bold]")
        for source in report.sources:
            console.print(
                f"  {escape(source.title)} [dim]{escape(source.uri)}[/dim]"
            )


def _prompt_for_script(
    session: Session, config: TrendScoutConfig
) -> GeneratedScript | None:
    """Let the user pick an idea and generate a script for it."""
    from trendscout.analysis.script import generate_script

    if session.report is None or not session.report.content_ideas:
        return None
    choice = typer.prompt(
        "\nGenerate a script for idea number (0 to skip)", type=int, default=0
    )
    if choice == 0:
        return None
    try:
        idea = session.select_idea(choice - 1)
    except IndexError:
        console.print("[red]Invalid selection.[/red]")
        raise typer.Exit(1) from None

    style_names = ", ".join(s.value for s in ScriptStyle)
    style_value = typer.prompt(
        f"Style ({style_names})", default=config.script.style
    )
    length = typer.prompt(
        "Target length in characters", type=int, default=config.script.target_length
    )
    try:
        style = ScriptStyle(style_value)
        output_format = ScriptFormat(config.script.output_format)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[bold]Writing script for: {escape(idea.title)}[/bold]")
    try:
        script = asyncio.run(
            generate_script(
                idea,
                session,
                length,
                style,
                output_format=output_format,
                config=config,
            )
        )
    except TrendScoutError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        console.print("[dim]You can retry the script generation.[/dim]")
        raise typer.Exit(1) from e

    console.print(f"\n{escape(script.text)}\n")
    console.print(f"[dim]{script.char_count} characters[/dim]")
    return script


@app.command()
def analyze(
    keyword: Annotated[str, typer.Argument(help="Keyword or niche to analyze")],
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Report language (e.g. English, ko)"),
    ] = None,
    date_range: Annotated[
        str | None,
        typer.Option("--date-range", "-d", help="Timeframe, e.g. 'this month'"),
    ] = None,
    duration: Annotated[
        str | None,
        typer.Option("--duration", help="Video length, e.g. 'short (1-5 min)'"),
    ] = None,
    api_key: Annotated[
        str,
        typer.Option(
            "--api-key", envvar="ANTHROPIC_API_KEY", help="Claude API key"
        ),
    ] = "",
    youtube_key: Annotated[
        str | None,
        typer.Option(
            "--youtube-key",
            envvar="YOUTUBE_API_KEY",
            help="YouTube Data API key (optional, for real video data)",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the report as Markdown"),
    ] = None,
    script: Annotated[
        bool,
        typer.Option("--script/--no-script", help="Offer script generation"),
    ] = True,
) -> None:
    """Analyze trends for a keyword, then optionally write a script."""
    from trendscout.analysis.analyzer import analyze_trends
    from trendscout.output.markdown import render_report, render_script

    config = _get_config()
    params = SearchParameters(
        keyword=keyword,
        language=language or config.general.language,
        date_range=date_range or config.general.date_range,
        video_duration=duration or config.general.video_duration,
        model_credential=api_key,
        metadata_credential=youtube_key or None,
    )
    session = Session()

    console.print(f"[bold]Analyzing trends for {keyword!r}...[/bold]")
    try:
        report = asyncio.run(analyze_trends(params, session, config=config))
    except ModelRequestError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        console.print(
            "[dim]Hint: check that your Claude API key is set and valid "
            "(--api-key or ANTHROPIC_API_KEY).[/dim]"
        )
        raise typer.Exit(1) from e
    except TrendScoutError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1) from e

    _print_report(report, keyword)

    generated = None
    if script and report.content_ideas:
        generated = _prompt_for_script(session, config)

    if output:
        content = render_report(report, keyword)
        if generated is not None:
            content += "\n" + render_script(generated)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content)
        console.print(f"[green]Report saved to {output}[/green]")


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = _get_config()
    console.print("[bold]Current Configuration[/bold]\n")

    sections = {
        "general": config.general,
        "claude": config.claude,
        "youtube": config.youtube,
        "script": config.script,
    }

    for name, section in sections.items():
        console.print(f"[bold cyan]\\[{name}][/bold cyan]")
        for key, value in section.__dict__.items():
            console.print(f"  {key} = {value}")
        console.print()


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Config key (e.g., claude.model)")],
    value: Annotated[str, typer.Argument(help="Value to set")],
) -> None:
    """Set a configuration value."""
    try:
        set_config_value(key, value)
        console.print(f"[green]Set {escape(key)} = {escape(value)}[/green]")
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
