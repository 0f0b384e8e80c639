"""CLI entry point for talk analyzer."""

from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console

from .analytics import analyze
from .config import DEFAULT_CLAUDE_DIR, AnalysisConfig, HourlyActivityConfig
from .hourly import analyze_hourly_activity
from .logging_config import setup_logging
from .parser import parse_directory
from .persona import persona_catalog
from .privacy import PrivacyLevel, PrivacySettings
from .reports import print_hourly, print_personas, print_report

console = Console()


def hourly_options(f):
    f = click.option("--timezone", "tz_name", help="IANA timezone for hour buckets (default: local)")(f)
    f = click.option("--max-history", default=20000, show_default=True, help="Most recent history entries to keep")(f)
    f = click.option("--lookback", default=120, show_default=True, help="Days of history.jsonl to read")(f)
    return f


def hourly_config(claude_dir: Path, lookback: int, max_history: int, tz_name: str | None) -> HourlyActivityConfig:
    return HourlyActivityConfig(
        history_dir=claude_dir,
        lookback_days=lookback,
        max_history_records=max_history,
        timezone=tz_name,
    )


def load_conversations(claude_dir: Path) -> list:
    console.print(f"[cyan]Reading transcripts from {claude_dir}...[/cyan]")
    conversations = parse_directory(claude_dir)
    console.print(f"Found [green]{len(conversations)}[/green] conversations")
    return conversations


@click.group()
@click.option(
    "--claude-dir",
    type=click.Path(file_okay=False),
    default=str(DEFAULT_CLAUDE_DIR),
    help="Claude data directory (holds projects/ and history.jsonl)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only show errors")
@click.pass_context
def cli(ctx, claude_dir, verbose, quiet):
    """Analyze your Claude conversation history."""
    setup_logging(verbose=verbose, quiet=quiet)
    ctx.ensure_object(dict)
    ctx.obj["claude_dir"] = Path(claude_dir)


@cli.command("analyze")
@hourly_options
@click.option("--top", default=20, show_default=True, help="Number of words and phrases to show")
@click.option("--tokens/--no-tokens", default=False, help="Count tokens per role with tiktoken")
@click.option("--llm", type=click.Choice(["off", "auto", "live"]), help="Refine sentence patterns with Claude")
@click.option("--json", "json_path", type=click.Path(dir_okay=False), help="Also write the full report as JSON")
@click.pass_context
def analyze_command(ctx, lookback, max_history, tz_name, top, tokens, llm, json_path):
    """Build and print the full analytics report."""
    claude_dir = ctx.obj["claude_dir"]
    conversations = load_conversations(claude_dir)

    config = AnalysisConfig.from_env(
        hourly=hourly_config(claude_dir, lookback, max_history, tz_name),
        count_tokens=tokens,
    )
    if llm:
        config = replace(config, llm=replace(config.llm, mode=llm))

    with console.status("Analyzing..."):
        report = analyze(conversations, config=config)

    print_report(report, top)

    if json_path:
        output_path = Path(json_path)
        output_path.write_text(report.to_json(), encoding="utf-8")
        console.print(f"[green]Wrote report to {output_path}[/green]")


@cli.command()
@hourly_options
@click.pass_context
def hourly(ctx, lookback, max_history, tz_name):
    """Show when you work, by hour of day."""
    claude_dir = ctx.obj["claude_dir"]
    conversations = load_conversations(claude_dir)
    summary = analyze_hourly_activity(conversations, hourly_config(claude_dir, lookback, max_history, tz_name))
    print_hourly(summary)


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False))
@click.option(
    "--privacy",
    type=click.Choice([level.value for level in PrivacyLevel]),
    default=PrivacyLevel.HIGH_PRIVACY.value,
    show_default=True,
    help="How much to reveal in the shared report",
)
@hourly_options
@click.pass_context
def export(ctx, output, privacy, lookback, max_history, tz_name):
    """Export a shareable report as JSON."""
    claude_dir = ctx.obj["claude_dir"]
    conversations = load_conversations(claude_dir)

    config = AnalysisConfig(hourly=hourly_config(claude_dir, lookback, max_history, tz_name))
    report = analyze(conversations, PrivacySettings.for_level(privacy), config)
    shareable = report.to_shareable()

    output_path = Path(output)
    output_path.write_text(shareable.to_json(), encoding="utf-8")

    console.print(f"[green]Exported to {output_path}[/green]")
    console.print(f"  Privacy level: {shareable.privacy_level.value}")
    console.print(f"  Technology clusters: {len(shareable.tech_clusters)}")
    console.print(f"  Key insights: {len(shareable.key_insights)}")
    if not shareable.samples:
        console.print("\n[dim]Activity samples excluded for privacy.[/dim]")


@cli.command()
def personas():
    """List the developer personas."""
    print_personas(persona_catalog())


if __name__ == "__main__":
    cli()
