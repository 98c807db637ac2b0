"""CLI entry point for worklog."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .config import DEFAULT_CONFIG, default_config_path, load_config, validate_threshold
from .models import SOURCE_TYPES
from .storage.snapshots import SNAPSHOT_PERIODS

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Show verbose output")
@click.pass_context
def cli(ctx, config_path, verbose):
    """Worklog - standup summaries from AI sessions, git commits and GitHub activity."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _get_config(ctx) -> dict:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ValueError as e:
        raise click.ClickException(str(e))


def range_options(func):
    """Date range and source selection shared by the reporting commands."""
    options = [
        click.option("--date", "-d", "date_str", default=None, help="Specific date (YYYY-MM-DD or weekday name)"),
        click.option("--yesterday", "-y", is_flag=True, help="Use yesterday's date"),
        click.option("--week", "-w", is_flag=True, help="Include the entire current week"),
        click.option("--month", "-m", is_flag=True, help="Include the entire current month"),
        click.option("--quarter", "-q", is_flag=True, help="Include the entire current quarter"),
        click.option("--last", is_flag=True, help="Use the previous day/week/month/quarter"),
        click.option("--sources", default=None, help=f"Comma-separated sources ({','.join(SOURCE_TYPES)})"),
        click.option("--repos", default=None, help="Comma-separated git repo paths"),
        click.option("--threshold", type=float, default=None, help="Clustering similarity threshold (0-1)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _select_readers(config: dict, sources: str | None) -> list:
    from .sources import get_readers_by_names

    names = [s.strip() for s in sources.split(",")] if sources else config["default_sources"]
    return get_readers_by_names(names)


def _gather(ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold):
    """Resolve config, date range and readers, then collect work items."""
    from .summary.report import collect_work_items
    from .utils.dates import format_date_range, parse_date_range

    config = _get_config(ctx)
    if repos:
        config["git_repos"] = [str(Path(r.strip()).expanduser()) for r in repos.split(",") if r.strip()]
    if threshold is not None:
        try:
            config["analysis"]["threshold"] = validate_threshold(threshold)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--threshold")

    try:
        date_range = parse_date_range(date_str, yesterday, week, month, quarter, last)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date")

    readers = _select_readers(config, sources)

    if ctx.obj.get("verbose"):
        err_console.print(f"[dim]Date range: {format_date_range(date_range)}[/]")
        err_console.print(f"[dim]Sources: {', '.join(r.name for r in readers)}[/]")

    items = collect_work_items(readers, date_range, config)

    if ctx.obj.get("verbose"):
        err_console.print(f"[dim]Total items: {len(items)}[/]")

    return config, date_range, items


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def init(ctx, force):
    """Write a default configuration file."""
    import yaml

    config_file = Path(ctx.obj.get("config_path") or default_config_path()).expanduser()
    if config_file.exists() and not force:
        console.print(f"[yellow]Config already exists: {config_file}[/]")
        return

    config_file.parent.mkdir(parents=True, exist_ok=True)
    header = (
        "# GitHub user whose public events are read via the gh CLI\n"
        "# github_user: your-login\n\n"
        "# Only count commits by this author (passed to git log --author)\n"
        "# git_author: you@example.com\n\n"
    )
    config_file.write_text(header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False))
    console.print(f"[bold green]✓ Created config: {config_file}[/]")


@cli.command()
@range_options
@click.option("--format", "-f", "fmt", type=click.Choice(["markdown", "json", "plain"]), default="markdown",
              help="Output format")
@click.option("--no-smart", is_flag=True, help="Skip clustering and narrative")
@click.option("--save-history", is_flag=True, help="Append the collected items to the history log")
@click.pass_context
def summary(ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold, fmt, no_smart,
            save_history):
    """Generate a standup summary for a day, week, month or quarter."""
    from .formatters import format_output
    from .storage.history import save_to_history
    from .summary.report import build_work_summary

    config, date_range, items = _gather(
        ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold,
    )
    work_summary = build_work_summary(items, date_range, config, smart=not no_smart)
    if save_history:
        entry = save_to_history(work_summary, config["data_dir"])
        err_console.print(f"[dim]Saved history entry {entry.id}[/]")
    # Formatter output is already final text; keep Rich from re-styling it
    click.echo(format_output(work_summary, fmt))


@cli.command()
@range_options
@click.pass_context
def clusters(ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold):
    """Show how work items cluster into themes."""
    from .summary.report import build_work_summary

    config, date_range, items = _gather(
        ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold,
    )
    if not items:
        console.print("[yellow]No work items found for this period.[/]")
        return

    smart = build_work_summary(items, date_range, config).smart_summary

    table = Table(title=f"Clusters (threshold {config['analysis']['threshold']})")
    table.add_column("ID", style="dim")
    table.add_column("Theme", style="cyan")
    table.add_column("Items", justify="right")
    table.add_column("Coherence", justify="right", style="green")
    table.add_column("Keywords", max_width=50)

    for c in smart.clusters:
        table.add_row(c.id, c.theme, str(len(c.items)), f"{c.coherence_score:.3f}", ", ".join(c.keywords))

    console.print(table)

    if smart.cross_cluster_connections:
        console.print("\n[bold]Connections:[/]")
        for conn in smart.cross_cluster_connections:
            console.print(f"  {conn.from_id} ↔ {conn.to_id} ({conn.relationship})")

    console.print(f"\n{smart.narrative}")


@cli.command()
@range_options
@click.option("--n", "-n", "top_n", default=None, type=int, help="Number of terms")
@click.pass_context
def terms(ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold, top_n):
    """List the most frequent terms across all work items."""
    from .analysis.terms import extract_key_terms
    from .config import build_tokenizer

    config, _, items = _gather(
        ctx, date_str, yesterday, week, month, quarter, last, sources, repos, threshold,
    )
    n = top_n if top_n is not None else config["analysis"].get("key_terms", 10)
    found = extract_key_terms(items, n, build_tokenizer(config))
    if not found:
        console.print("[yellow]No terms found.[/]")
        return
    for i, term in enumerate(found, 1):
        console.print(f"  {i:>2}. {term}")


@cli.group()
def snapshot():
    """Store and render per-period snapshots of work items."""


@snapshot.command("write")
@click.argument("period", type=click.Choice(SNAPSHOT_PERIODS))
@click.option("--at", "at", type=click.DateTime(), default=None,
              help="Pretend the run happens at this time (default: now)")
@click.option("--sources", default=None, help=f"Comma-separated sources ({','.join(SOURCE_TYPES)})")
@click.pass_context
def snapshot_write(ctx, period, at, sources):
    """Snapshot the last complete PERIOD before now."""
    from .scheduling.run import run_period

    config = _get_config(ctx)
    key, path = run_period(period, config, _select_readers(config, sources), now=at)
    console.print(f"[bold green]✓ Wrote {period} snapshot {key}[/] → {path}")


@snapshot.command("list")
@click.argument("period", type=click.Choice(SNAPSHOT_PERIODS))
@click.pass_context
def snapshot_list(ctx, period):
    """List stored snapshots for PERIOD, newest first."""
    from .storage.snapshots import get_snapshot_label, list_snapshot_keys

    config = _get_config(ctx)
    keys = list_snapshot_keys(period, config["data_dir"])
    if not keys:
        console.print(f"[yellow]No {period} snapshots in {config['data_dir']}[/]")
        return

    table = Table(title=f"{period.capitalize()} snapshots")
    table.add_column("Key", style="cyan")
    table.add_column("Period")
    for key in keys:
        table.add_row(key, get_snapshot_label(period, key))
    console.print(table)


@snapshot.command("show")
@click.argument("period", type=click.Choice(SNAPSHOT_PERIODS))
@click.argument("key")
@click.option("--format", "-f", "fmt", type=click.Choice(["markdown", "json", "plain"]), default="markdown",
              help="Output format")
@click.pass_context
def snapshot_show(ctx, period, key, fmt):
    """Render a stored snapshot, clustering its items afresh."""
    from .formatters import format_output
    from .storage.snapshots import load_snapshot
    from .summary.report import build_work_summary

    config = _get_config(ctx)
    try:
        stored = load_snapshot(period, key, config["data_dir"])
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))
    work_summary = build_work_summary(stored.items, stored.date_range, config, now=stored.generated_at)
    click.echo(format_output(work_summary, fmt))


@snapshot.command("aggregate")
@click.option("--since", type=click.DateTime(), required=True, help="First day (YYYY-MM-DD)")
@click.option("--until", type=click.DateTime(), required=True, help="Last day (YYYY-MM-DD)")
@click.option("--format", "-f", "fmt", type=click.Choice(["markdown", "json", "plain"]), default="markdown",
              help="Output format")
@click.pass_context
def snapshot_aggregate(ctx, since, until, fmt):
    """Summarize every daily snapshot between --since and --until."""
    from .formatters import format_output
    from .storage.snapshots import aggregate_daily_snapshots
    from .summary.report import build_work_summary

    config = _get_config(ctx)
    try:
        merged = aggregate_daily_snapshots(since, until, config["data_dir"])
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--since")
    work_summary = build_work_summary(merged.items, merged.date_range, config, now=merged.generated_at)
    click.echo(format_output(work_summary, fmt))


@cli.command()
@click.option("--clusters", "show_clusters", is_flag=True, help="Cluster every saved item and print the narrative")
@click.pass_context
def history(ctx, show_clusters):
    """Show entries saved with `summary --save-history`."""
    from .storage.history import get_all_history_items, get_history_path, load_history
    from .utils.dates import format_date_range

    config = _get_config(ctx)
    entries = load_history(config["data_dir"])
    if not entries:
        console.print(f"[yellow]No history at {get_history_path(config['data_dir'])}[/]")
        return

    table = Table(title="History")
    table.add_column("ID", style="dim")
    table.add_column("Saved")
    table.add_column("Range", style="cyan")
    table.add_column("Items", justify="right")
    table.add_column("Sources")
    for entry in entries:
        table.add_row(entry.id, f"{entry.timestamp:%Y-%m-%d %H:%M}", format_date_range(entry.date_range),
                      str(len(entry.items)), ", ".join(entry.sources))
    console.print(table)

    if show_clusters:
        from .config import build_tokenizer
        from .summary.narrative import build_smart_summary

        analysis = config["analysis"]
        smart = build_smart_summary(
            get_all_history_items(config["data_dir"]),
            threshold=analysis["threshold"],
            tokenizer=build_tokenizer(config),
            top_k=analysis.get("top_keywords", 5),
            period="period",
        )
        console.print(f"\n{smart.narrative}")


@cli.command()
@click.option("--weeks", default=4, show_default=True, help="Weeks of daily and weekly snapshots")
@click.option("--months", default=1, show_default=True, help="Months of monthly snapshots")
@click.option("--daily/--no-daily", default=True)
@click.option("--weekly/--no-weekly", default=True)
@click.option("--monthly/--no-monthly", default=True)
@click.option("--quarterly/--no-quarterly", default=False)
@click.option("--since", type=click.DateTime(), default=None, help="Start of an explicit range")
@click.option("--until", type=click.DateTime(), default=None, help="End of an explicit range (default: yesterday)")
@click.option("--overwrite", is_flag=True, help="Rewrite snapshots that already exist")
@click.option("--dry-run", is_flag=True, help="Only print the plan")
@click.option("--sources", default=None, help=f"Comma-separated sources ({','.join(SOURCE_TYPES)})")
@click.pass_context
def backfill(ctx, weeks, months, daily, weekly, monthly, quarterly, since, until, overwrite, dry_run, sources):
    """Write missing snapshots for past periods."""
    from .scheduling.backfill import build_backfill_plan, execute_backfill_plan

    config = _get_config(ctx)
    plan = build_backfill_plan(
        weeks=weeks, months=months,
        daily=daily, weekly=weekly, monthly=monthly, quarterly=quarterly,
        since=since, until=until, root_dir=config["data_dir"],
    )
    if dry_run:
        for item in plan:
            state = "exists" if item.expected_path.exists() else "missing"
            console.print(f"  {item.period:<9} {item.expected_key:<10} {state}")

    result = execute_backfill_plan(
        plan, config, _select_readers(config, sources), overwrite=overwrite, dry_run=dry_run,
    )
    console.print(
        f"Planned {result.planned}, written {result.written}, "
        f"skipped {result.skipped}, errors {result.errors}"
    )
    if result.errors:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
