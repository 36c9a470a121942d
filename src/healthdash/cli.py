"""CLI for the healthdash analytics toolkit."""

from __future__ import annotations

from datetime import datetime

import click

from healthdash.analytics.activity import DEFAULT_STEP_GOAL
from healthdash.analytics.longterm import DEFAULT_INTERVAL, INTERVALS
from healthdash.analytics.sleep import DEFAULT_RECOMMENDED_HOURS


def _summarize(
    data_dir: str,
    step_goal: int,
    sleep_hours: float,
    interval: str,
    as_of: datetime | None,
    verbose: bool = False,
):
    from healthdash.analytics.pipeline import run_pipeline
    from healthdash.loader import load_export

    dataset = load_export(data_dir, verbose=verbose)
    return run_pipeline(
        dataset,
        step_goal=step_goal,
        recommended_hours=sleep_hours,
        interval=interval,
        as_of=as_of,
    )


def _common_options(fn):
    options = [
        click.argument("data_dir", type=click.Path(exists=True, file_okay=False)),
        click.option("--step-goal", default=DEFAULT_STEP_GOAL, show_default=True,
                     help="Daily step goal for streaks."),
        click.option("--sleep-hours", default=DEFAULT_RECOMMENDED_HOURS, show_default=True,
                     help="Recommended nightly sleep in hours."),
        click.option("--interval", type=click.Choice(list(INTERVALS)), default=DEFAULT_INTERVAL,
                     show_default=True, help="Window for the quarterly table."),
        click.option("--as-of", type=click.DateTime(), default=None,
                     help="Evaluation instant for time-relative windows (default: now)."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


@click.group()
def main() -> None:
    """healthdash: statistics over exported fitness-tracker data."""


@main.command("analyze")
@_common_options
@click.option("--output", "-o", default=None, help="Write summary JSON to file.")
@click.option("--verbose", "-v", is_flag=True, help="Report rows skipped while loading.")
def analyze_cmd(
    data_dir: str,
    step_goal: int,
    sleep_hours: float,
    interval: str,
    as_of: datetime | None,
    output: str | None,
    verbose: bool,
) -> None:
    """Run the full analytics pipeline on an export directory."""
    summary = _summarize(data_dir, step_goal, sleep_hours, interval, as_of, verbose)
    a, s, b, st = summary.activity, summary.sleep, summary.body, summary.stress

    click.echo(f"\n{'=' * 60}")
    click.echo(f"  Activity:  {a.avg_daily_steps:,} steps/day over {a.total_days} days "
               f"(streak {a.current_streak}, best {a.longest_streak})")
    click.echo(f"  Sleep:     {s.avg_total_sleep_h:.1f} h/night "
               f"(eff {s.sleep_efficiency}%, bed {s.avg_bedtime or '-'})")
    click.echo(f"  Body:      {b.current_weight:.1f} kg ({b.weight_change:+.1f}) "
               f"BMI {b.current_bmi:.1f} {b.bmi_category or '-'}")
    click.echo(f"  Resting HR: {st.avg_resting_hr} bpm, HRV≈{st.estimated_hrv} ms")
    click.echo(f"  Stress:    {st.avg_stress_score}/100 ({st.stress_level})")
    click.echo(f"{'=' * 60}")

    if output:
        with open(output, "w") as f:
            f.write(summary.to_json())
        click.echo(f"\nSummary written to {output}")
    else:
        click.echo(summary.to_json())


@main.command("trends")
@_common_options
def trends_cmd(
    data_dir: str,
    step_goal: int,
    sleep_hours: float,
    interval: str,
    as_of: datetime | None,
) -> None:
    """Print quarterly and yearly tables."""
    summary = _summarize(data_dir, step_goal, sleep_hours, interval, as_of)
    long_term = summary.long_term

    def _row(p) -> str:
        weight = f"{p.avg_weight:.1f}" if p.avg_weight is not None else "-"
        return (f"  {p.period:<9} {p.avg_steps:>8,} {p.avg_sleep_h:>7.1f} "
                f"{weight:>7} {p.avg_hr:>5}")

    header = f"  {'period':<9} {'steps':>8} {'sleep':>7} {'weight':>7} {'hr':>5}"

    click.echo(f"\nQuarterly ({long_term.interval}):")
    click.echo(header)
    for q in long_term.quarterly:
        click.echo(_row(q))

    click.echo("\nYearly:")
    click.echo(header)
    for y in long_term.yearly:
        click.echo(_row(y))

    if long_term.best_steps_year is not None:
        best = long_term.best_steps_year
        click.echo(f"\nMost active year: {best.period} "
                   f"({best.avg_steps:,} steps/day over {best.days_tracked} days)")
    if long_term.best_sleep_year is not None:
        click.echo(f"Best sleep year:  {long_term.best_sleep_year.period} "
                   f"({long_term.best_sleep_year.avg_sleep_h}h per night)")


@main.command("context")
@_common_options
def context_cmd(
    data_dir: str,
    step_goal: int,
    sleep_hours: float,
    interval: str,
    as_of: datetime | None,
) -> None:
    """Print the health context block used to prime a chat assistant."""
    from healthdash.analytics.summary import health_context

    summary = _summarize(data_dir, step_goal, sleep_hours, interval, as_of)
    click.echo(health_context(summary))


if __name__ == "__main__":
    main()
