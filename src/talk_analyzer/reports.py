"""Report rendering for CLI output."""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .achievements import CATEGORY_ICONS, RARITY_COLORS, format_progress
from .models import AchievementSummary, DeveloperPersona, HeatmapData, HourlyActivitySummary, SentenceAnalysisSummary
from .report import AnalyticsReport

console = Console()

TONE_STYLES = {"positive": "green", "neutral": "cyan", "caution": "yellow"}
IMPORTANCE_STYLES = {"high": "bold red", "medium": "yellow", "low": "dim"}


def print_summary(report: AnalyticsReport):
    """Print overall corpus statistics."""
    stats = report.statistics

    if stats.total_conversations == 0:
        console.print("[yellow]No conversations found.[/yellow]")
        return

    table = Table(title="Summary Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    if stats.date_range:
        start, end = stats.date_range
        table.add_row("Date Range", f"{start.date()} to {end.date()}")
    table.add_row("Conversations", str(stats.total_conversations))
    table.add_row("Messages", str(stats.total_messages))
    table.add_row("Words", f"{stats.total_words:,}")
    table.add_row("Avg Messages/Conversation", f"{stats.average_messages_per_conversation:.1f}")
    table.add_row("Avg Words/Message", f"{stats.average_words_per_message:.1f}")
    if stats.user_tokens or stats.assistant_tokens:
        table.add_row("Your Tokens", f"{stats.user_tokens:,}")
        table.add_row("Assistant Tokens", f"{stats.assistant_tokens:,}")
    if stats.most_active_day:
        day, count = stats.most_active_day
        table.add_row("Most Active Day", f"{day} ({count} conversations)")
    if stats.most_active_hour:
        hour, count = stats.most_active_hour
        table.add_row("Most Active Hour", f"{hour:02d}:00 ({count} conversations)")
    table.add_row("Vocabulary Richness", f"{report.word_cloud.vocabulary_richness:.3f}")

    console.print(table)


def print_words(report: AnalyticsReport, limit: int = 20):
    """Print top weighted words and phrases."""
    words = report.word_cloud.top_words(limit)
    if not words:
        console.print("[yellow]No frequent words found.[/yellow]")
        return

    table = Table(title=f"Top {limit} Words")
    table.add_column("Word", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Weight", style="green", justify="right")
    table.add_column("Category", style="magenta")
    for word in words:
        table.add_row(escape(word.text), str(word.value), f"{word.weight:.2f}", word.category or "")
    console.print(table)

    phrases = report.word_cloud.phrases[:limit]
    if phrases:
        table = Table(title="Common Phrases")
        table.add_column("Phrase", style="cyan")
        table.add_column("Count", style="green", justify="right")
        for phrase in phrases:
            table.add_row(escape(phrase.text), str(phrase.frequency))
        console.print(table)


def print_clusters(report: AnalyticsReport, limit: int = 10):
    for collection, title in (
        (report.tech_stack_clusters, "Technologies"),
        (report.task_type_clusters, "Task Types"),
        (report.topic_clusters, "Topics"),
    ):
        clusters = collection.largest(limit)
        if not clusters:
            continue
        table = Table(title=f"{title} (coverage {collection.coverage:.2f})")
        table.add_column("Cluster", style="cyan")
        table.add_column("Conversations", style="green", justify="right")
        table.add_column("Keywords", style="dim")
        for cluster in clusters:
            table.add_row(escape(cluster.label), str(cluster.size), escape(", ".join(cluster.keywords[:5])))
        console.print(table)


def print_insights(report: AnalyticsReport):
    if not report.insights:
        return
    console.print("\n[bold]Insights:[/bold]\n")
    for insight in report.insights:
        style = IMPORTANCE_STYLES[insight.importance]
        console.print(f"[{style}]{insight.importance.upper()}[/{style}] [cyan]{insight.title}[/cyan]")
        console.print(f"  {escape(insight.description)}")


def print_hourly(summary: HourlyActivitySummary | None):
    """Print the hour-of-day profile as a bar table."""
    if summary is None:
        console.print("[yellow]No activity found.[/yellow]")
        return

    peak = max(summary.peak_hour.count, 1)
    table = Table(title=f"Hourly Activity ({summary.timezone}, {summary.total_events} events)")
    table.add_column("Hour", style="cyan", justify="right")
    table.add_column("Events", justify="right")
    table.add_column("", style="green")
    for bucket in summary.buckets:
        bar = "█" * round(bucket.count / peak * 30)
        table.add_row(bucket.label, str(bucket.count), bar)
    console.print(table)

    console.print(f"\n[bold]{summary.trend_statement}[/bold]")
    if summary.focus_window:
        console.print(f"  Focus window: {summary.focus_window.label}")
    console.print(
        f"  Night {summary.night_share:.0%}  Early {summary.early_share:.0%}  Weekend {summary.weekend_share:.0%}"
    )
    console.print(f"  Sources: {', '.join(f'{k}={v}' for k, v in summary.source_breakdown.items())}")

    for rec in summary.recommendations:
        style = TONE_STYLES[rec.tone]
        console.print(f"  {rec.icon} [{style}]{rec.title}[/{style}]: {rec.description}")


def print_heatmap(heatmap: HeatmapData | None):
    if heatmap is None or heatmap.stats.active_days == 0:
        return
    stats = heatmap.stats
    streak = heatmap.streak
    active = " (active)" if streak.is_active else ""
    console.print(
        f"\n[bold]Streaks:[/bold] current {streak.current_streak} days{active}, longest {streak.longest_streak} days"
    )
    console.print(
        f"  {stats.active_days} active days, busiest {stats.max_day_date} with {stats.max_day_count} conversations"
    )


def print_achievements(summary: AchievementSummary | None):
    if summary is None or not summary.achievements:
        return
    table = Table(
        title=f"Achievements ({summary.total_unlocked}/{summary.total_available}, "
        f"{summary.completion_percentage:.0f}% complete)"
    )
    table.add_column("", justify="center")
    table.add_column("Badge")
    table.add_column("Rarity")
    table.add_column("Progress", justify="right")
    table.add_column("Criteria", style="dim")
    for achievement in summary.achievements:
        color = RARITY_COLORS[achievement.rarity]
        name = achievement.name if achievement.unlocked else f"[dim]{achievement.name}[/dim]"
        table.add_row(
            f"{CATEGORY_ICONS[achievement.category]} {achievement.icon}",
            name,
            f"[{color}]{achievement.rarity}[/{color}]",
            format_progress(achievement.progress),
            achievement.criteria,
        )
    console.print(table)


def print_sentences(summary: SentenceAnalysisSummary | None, limit: int = 5):
    if summary is None or summary.total_sentences == 0:
        return
    table = Table(title=f"What You Ask ({summary.total_sentences} sentences, {summary.unique_sentences} unique)")
    table.add_column("Intent", style="magenta")
    table.add_column("Count", justify="right")
    table.add_column("Share", style="green", justify="right")
    for item in summary.intent_breakdown:
        table.add_row(item.intent, str(item.count), f"{item.percentage:.1f}%")
    console.print(table)

    for title, stats in (("Repeated sentences", summary.top_sentences), ("Top questions", summary.top_questions)):
        if not stats:
            continue
        console.print(f"\n[bold]{title}:[/bold]")
        for stat in stats[:limit]:
            console.print(f"  [dim]{stat.frequency}x[/dim] {escape(stat.sentence)}")


def persona_panel(persona: DeveloperPersona) -> Panel:
    traits = "\n".join(f"  • {trait}" for trait in persona.traits)
    body = (
        f"{persona.description}\n\n{traits}\n\n"
        f"[bold]{persona.mbti}[/bold]: {persona.mbti_description}"
    )
    return Panel(body, title=f"{persona.emoji} {persona.name}", border_style="cyan")


def print_personas(personas: Sequence[DeveloperPersona]):
    table = Table(title="Developer Personas")
    table.add_column("ID", style="dim")
    table.add_column("Persona", style="cyan")
    table.add_column("MBTI", style="magenta")
    table.add_column("Description")
    for persona in personas:
        table.add_row(persona.id, f"{persona.emoji} {persona.name}", persona.mbti, persona.description)
    console.print(table)


def print_report(report: AnalyticsReport, top: int = 20):
    """Print every section of a report."""
    print_summary(report)
    if report.statistics.total_conversations == 0:
        return
    console.print()
    if report.persona:
        console.print(persona_panel(report.persona))
    print_words(report, top)
    print_clusters(report)
    print_hourly(report.hourly_activity)
    print_heatmap(report.heatmap)
    print_achievements(report.achievements)
    print_sentences(report.sentence_patterns)
    print_insights(report)
    console.print(f"\n[dim]Generated {report.generated_at:%Y-%m-%d %H:%M} · v{report.version}[/dim]")
