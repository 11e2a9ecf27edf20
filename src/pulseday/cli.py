"""CLI for the pulseday daily aggregation engine."""

import logging
from datetime import date, datetime

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """pulseday: reduce a day of wearable readings to a daily summary."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _parse_day(value: str | None) -> date:
    if value is None:
        return date.today()
    return datetime.strptime(value, "%Y-%m-%d").date()


@main.command("summarize")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", "day", default=None, help="Day being summarised (YYYY-MM-DD, default today).")
@click.option("--flags", "flags_path", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Existing store JSON to continue from.")
@click.option("--previous-hrv", default=None, type=float, help="Previous day's HRV (ms).")
@click.option("--previous-nocturnal-hr", default=None, type=float, help="Previous day's nocturnal HR (bpm).")
@click.option("--previous-resting-hr", default=None, type=float, help="Previous day's resting HR (bpm).")
@click.option("--recent-sleep-hours", multiple=True, type=float,
              help="Measured sleep (hours) of a recent night; repeat per night.")
@click.option("--debt-window-hours", multiple=True, type=float,
              help="Sleep (hours) of an earlier night in the debt window, oldest first; repeat per night.")
@click.option("--output", "-o", default=None, help="Write summary JSON to file.")
def summarize_cmd(
    file: str,
    day: str | None,
    flags_path: str | None,
    previous_hrv: float | None,
    previous_nocturnal_hr: float | None,
    previous_resting_hr: float | None,
    recent_sleep_hours: tuple[float, ...],
    debt_window_hours: tuple[float, ...],
    output: str | None,
) -> None:
    """Aggregate a JSONL reading log into a daily summary."""
    from pulseday.flags import DailyFlags
    from pulseday.pipeline import aggregate_day, partition_records
    from pulseday.readings import replay_readings
    from pulseday.summary import DayHistory

    try:
        target_day = _parse_day(day)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {day!r}", param_hint="--date") from None

    flags = None
    if flags_path:
        with open(flags_path) as f:
            flags = DailyFlags.from_json(f.read())

    records = replay_readings(file)
    quantity, sleep, deleted = partition_records(records)

    summary = aggregate_day(
        target_day,
        quantity=quantity,
        sleep=sleep,
        deleted_ids=deleted,
        flags=flags,
        history=DayHistory(
            previous_hrv=previous_hrv,
            previous_nocturnal_hr=previous_nocturnal_hr,
            previous_resting_hr=previous_resting_hr,
            recent_sleep_hours=recent_sleep_hours,
            debt_window_hours=debt_window_hours,
        ),
    )

    click.echo(summary.to_json())

    if output:
        with open(output, "w") as f:
            f.write(summary.to_json())
        click.echo(f"\nSummary written to {output}")


if __name__ == "__main__":
    main()
