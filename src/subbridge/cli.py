"""CLI entry point for subbridge."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from tqdm import tqdm

from .client import BackendClient
from .config import Config
from .controller import TranslationController
from .errors import TransferError
from .estimator import TimeEstimator
from .models import BATCH_SIZES, ProgressState, Settings
from .progress import format_time_remaining, stage_for
from .srt import count_subtitles, read_srt_text
from .transfer import Transfer

OFFLINE_HINTS = (
    "The translation service is running",
    "SUBBRIDGE_API_URL points at it",
    "Cross-origin requests (CORS) or your proxy allow this client",
)


class ProgressDisplay:
    """Renders progress updates as a tqdm bar."""

    def __init__(self):
        self.bar = tqdm(
            total=100,
            bar_format="{desc} |{bar}| {n:.0f}% {postfix}",
            leave=True,
        )

    def __call__(self, state: ProgressState) -> None:
        self.bar.n = state.progress
        self.bar.set_description_str(state.message or "Processing...", refresh=False)
        postfix = []
        if state.total:
            postfix.append(f"{state.current}/{state.total}")
        if stage_for(state.progress) == "translation":
            remaining = format_time_remaining(state.estimated_time_remaining)
            if remaining:
                postfix.append(remaining)
        self.bar.set_postfix_str(" ".join(postfix), refresh=False)
        self.bar.refresh()

    def close(self) -> None:
        self.bar.close()


def _read_config() -> Config:
    try:
        return Config.from_env()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")


def _load_config(api_url: str | None) -> Config:
    config = _read_config()
    if api_url:
        config.api_url = api_url
    if not config.has_api_url():
        raise click.ClickException("SUBBRIDGE_API_URL is empty. Set it or pass --api-url.")
    return config


def _estimator(config: Config) -> TimeEstimator:
    try:
        return TimeEstimator(config.calibration())
    except ValidationError as e:
        raise click.ClickException(f"Invalid time calibration: {e}")


def _echo_offline(config: Config, error: Exception) -> None:
    click.secho("Translation service offline", fg="yellow", bold=True)
    click.echo(f"  {error}".splitlines()[0])
    click.echo("  Please check:")
    for hint in OFFLINE_HINTS:
        click.echo(f"    - {hint}")
    click.echo(f"  API URL: {config.api_url}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show log messages")
def main(verbose: bool) -> None:
    """Translate English subtitle files with a remote translation service."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--fast",
    is_flag=True,
    help="Use fast mode (lower quality)",
)
def estimate(input_path: str, fast: bool) -> None:
    """Count subtitles in INPUT_PATH and estimate the translation time."""
    config = _read_config()
    total = count_subtitles(read_srt_text(input_path))
    seconds = _estimator(config).estimate(total, fast)
    click.echo(f"Subtitles: {total}")
    click.echo(f"Estimated time: {format_time_remaining(seconds) or '0s'} ({seconds:.1f}s)")


@main.command()
@click.option("--api-url", help="Translation service URL (default: $SUBBRIDGE_API_URL)")
def check(api_url: str | None) -> None:
    """Check that the translation service is reachable."""
    config = _load_config(api_url)

    async def run_check() -> None:
        async with BackendClient(config.api_url) as client:
            await client.check_connection()

    try:
        asyncio.run(run_check())
    except TransferError as e:
        _echo_offline(config, e)
        sys.exit(1)
    click.secho("Translation service is online", fg="green")


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--batch-size",
    type=click.Choice([str(size) for size in BATCH_SIZES]),
    default="32",
    show_default=True,
    help="Subtitles the service translates at once",
)
@click.option(
    "--fast",
    is_flag=True,
    help="Use fast mode (lower quality)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output SRT file path (default: <prefix><input name> next to the input)",
)
@click.option("--api-url", help="Translation service URL (default: $SUBBRIDGE_API_URL)")
@click.option(
    "--check",
    "check_first",
    is_flag=True,
    help="Check the service is online before uploading",
)
def translate(
    input_path: str,
    batch_size: str,
    fast: bool,
    output: str | None,
    api_url: str | None,
    check_first: bool,
) -> None:
    """Translate the subtitle file INPUT_PATH.

    \b
    Examples:
      subbridge translate movie.srt
      subbridge translate movie.srt --fast --batch-size 16 -o movie.si.srt
    """
    config = _load_config(api_url)
    estimator = _estimator(config)
    settings = Settings(batch_size=int(batch_size), fast_mode=fast)

    total = count_subtitles(read_srt_text(input_path))
    seconds = estimator.estimate(total, settings.fast_mode)
    click.echo(f"Input: {input_path}")
    click.echo(f"Subtitles: {total}, estimated time: {format_time_remaining(seconds) or '0s'}")
    click.echo(f"Service: {config.api_url}")
    click.echo()

    display = ProgressDisplay()

    async def run_translation() -> TranslationController:
        async with BackendClient(config.api_url, timeout=config.timeout) as client:
            if check_first:
                await client.check_connection()
            transfer = Transfer(client, estimator, tick_interval=config.tick_interval)
            controller = TranslationController(
                transfer, on_progress=display, output_prefix=config.output_prefix
            )
            controller.select_file(input_path)
            await controller.start_translate(settings)
            return controller

    try:
        controller = asyncio.run(run_translation())
    except TransferError as e:
        click.secho(f"Translation failed: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        display.close()

    saved = controller.save(Path(output) if output else None)
    click.echo()
    click.secho(f"Done! Saved to {saved}", fg="green", bold=True)


if __name__ == "__main__":
    main()
