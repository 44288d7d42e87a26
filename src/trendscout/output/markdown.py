"""Markdown output renderer."""

from trendscout.models import GeneratedScript, TrendReport


def render_report(report: TrendReport, keyword: str) -> str:
    """Render a TrendReport as Markdown."""
    lines: list[str] = []

    lines.append(f"# Trend report: {keyword}")
    lines.append(
        f"\n*Growth score: {report.growth_score}/100 | "
        f"Competition: {report.competition_level}*"
    )
    lines.append(f"\n> {report.summary}")

    if report.trend_topics:
        lines.append("\n## Trending topics\n")
        for topic in report.trend_topics:
            lines.append(f"- {topic.topic} ({topic.score})")

    if report.related_videos:
        lines.append("\n## Related videos\n")
        lines.append("| Title | Channel | Views | Published | Length |")
        lines.append("|---|---|---|---|---|")
        for video in report.related_videos:
            title = video.title.replace("|", "\\|")
            lines.append(
                f"| [{title}]({video.url}) | {video.channel} | {video.views} "
                f"| {video.published_date} | {video.duration} |"
            )

    if report.content_ideas:
        lines.append("\n## Content ideas\n")
        for i, idea in enumerate(report.content_ideas, start=1):
            lines.append(f"### {i}. {idea.title}")
            lines.append(f"\n*{idea.type}*")
            if idea.hook:
                lines.append(f"\n**Hook:** {idea.hook}")
            if idea.description:
                lines.append(f"\n{idea.description}")
            lines.append("")

    if report.sources:
        lines.append("\n## Sources\n")
        for source in report.sources:
            lines.append(f"- [{source.title}]({source.uri})")

    lines.append("")
    return "\n".join(lines)


def render_script(script: GeneratedScript) -> str:
    """Render a GeneratedScript as Markdown."""
    lines = [
        f"# Script: {script.idea.title}",
        f"\n*Style: {script.style.value} | Target: {script.target_length} "
        f"characters | Actual: {script.char_count} characters*",
        "",
        script.text,
        "",
    ]
    return "\n".join(lines)
