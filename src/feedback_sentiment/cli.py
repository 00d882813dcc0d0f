import json
import logging

import click
from pydantic import ValidationError

from .config.config import LOG_LEVELS, get_settings
from .pipelines.feedback_pipeline import (
    build_analytics,
    build_system_stats,
    filter_feedback,
    import_feedback_csv,
)
from .services.aggregator import Aggregator
from .services.sentiment_service import get_sentiment_service
from .utils.io import load_records, save_records

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the LOG_LEVEL setting.",
)
def main(log_level):
    """Client feedback sentiment scoring and analytics."""
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid settings: {e}")
    level = (log_level or settings.LOG_LEVEL_NORMALIZED).upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("text")
def score(text):
    """Score a single piece of feedback text."""
    judgment = get_sentiment_service().score(text)
    click.echo(json.dumps(judgment.model_dump(mode="json")))


@main.command(name="import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", default=None, help="Parquet path (default: DATA_PATH setting).")
@click.option("--user-id", default=None, help="Owner recorded on every imported row.")
def import_(csv_path, output, user_id):
    """Score every row of a feedback CSV and save the records."""
    records = import_feedback_csv(csv_path, user_id=user_id)
    if not records:
        click.echo("No feedback rows found.")
        return
    saved = save_records(records, output)
    click.echo(f"Successfully uploaded {len(records)} feedback items ({saved})")


@main.command()
@click.option("--input", "input_path", default=None, help="Parquet path (default: DATA_PATH setting).")
@click.option("--start-date", type=click.DateTime(formats=DATE_FORMATS), default=None)
@click.option("--end-date", type=click.DateTime(formats=DATE_FORMATS), default=None)
@click.option("--user-id", default=None)
@click.option("--tz", default=None, help="Timezone for daily trend buckets.")
@click.option("--plot/--no-plot", default=False, show_default=True)
def analytics(input_path, start_date, end_date, user_id, tz, plot):
    """Print stats and the daily trend for stored feedback."""
    records = load_records(input_path)
    payload = build_analytics(records, start_date, end_date, user_id=user_id, tz=tz)
    click.echo(json.dumps(payload, indent=2))

    if plot:
        from .utils.visualizations import plot_sentiment_distribution, plot_sentiment_trend

        selected = filter_feedback(records, start_date, end_date, user_id=user_id)
        plot_sentiment_distribution(Aggregator.aggregate(r.sentiment for r in selected))
        plot_sentiment_trend(Aggregator.bucket_by_day(selected, tz=tz))


@main.command(name="system-stats")
@click.option("--input", "input_path", default=None, help="Parquet path (default: DATA_PATH setting).")
def system_stats(input_path):
    """Print label breakdown, top contributors and recent feedback."""
    click.echo(json.dumps(build_system_stats(load_records(input_path)), indent=2))


if __name__ == "__main__":
    main()
