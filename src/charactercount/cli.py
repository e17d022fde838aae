#!/usr/bin/env python3
"""
CLI tool for checking text against character and word limits.

Provides commands for counting a text, printing the static limit hint, and
watching a file with the live engine so edits made by other programs are
reported the way a focused field would report them.
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .config import Settings, load_settings
from .engine import CharacterCountEngine, evaluate
from .errors import ConfigurationError
from .messages import Message, format_fallback_hint
from .policy import policy_from_options
from .publisher import CountResult
from .text_source import InMemoryTextSource

logger = logging.getLogger(__name__)


class FileTextSource(InMemoryTextSource):
    """
    A file treated as a focused text field.

    The file's content is the live value. Writes by other programs never
    fire an edit notification, so only the reconciler picks them up.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._last_read = self._read()
        self._undecodable = False
        super().__init__(self._last_read)

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def get_value(self) -> str:
        """Current content, or the last readable content while the file is not UTF-8."""
        try:
            self._last_read = self._read()
        except UnicodeDecodeError as e:
            if not self._undecodable:
                logger.warning(
                    f"{self.path} is not valid UTF-8 ({e.reason}); keeping last readable content"
                )
            self._undecodable = True
        else:
            self._undecodable = False
        return self._last_read


def _options(maxlength: Optional[int], maxwords: Optional[int],
             threshold: Optional[int]) -> dict:
    options = {"maxlength": maxlength, "maxwords": maxwords}
    if threshold is not None:
        options["threshold"] = threshold
    return options


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Character and word limit tools."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)
    ctx.obj = settings
    logging.basicConfig(
        level=logging.DEBUG if (debug or settings.debug) else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.pass_obj
@click.argument('text', required=False)
@click.option('--maxlength', type=int, help='Maximum number of characters')
@click.option('--maxwords', type=int, help='Maximum number of words (overrides --maxlength)')
@click.option('--threshold', type=int, help='Percentage of the limit before feedback shows')
@click.option('--format', 'output_format', type=click.Choice(['simple', 'json']),
              default='simple', help='Output format (default: simple)')
def count(settings: Settings, text: Optional[str], maxlength: Optional[int],
          maxwords: Optional[int], threshold: Optional[int], output_format: str) -> None:
    """Count TEXT (or stdin) and print the feedback message.

    Exits with status 1 when the text is over the limit.
    """
    if text is None:
        text = click.get_text_stream('stdin').read()

    try:
        result = evaluate(
            text,
            _options(maxlength, maxwords, threshold),
            default_threshold=settings.default_threshold,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    if output_format == 'json':
        click.echo(json.dumps(result, indent=2))
    else:
        unit = "words" if result["mode"] == "words" else "characters"
        if result["limit"] is None:
            click.echo(f"{result['count']} {unit} (no limit)")
        else:
            click.echo(f"{result['count']} / {result['limit']} {unit}")
            status = "shown" if result["visible"] else "hidden"
            click.echo(f"{result['message']} ({status})")

    if result["is_over_limit"]:
        sys.exit(1)


@cli.command()
@click.option('--maxlength', type=int, help='Maximum number of characters')
@click.option('--maxwords', type=int, help='Maximum number of words (overrides --maxlength)')
def hint(maxlength: Optional[int], maxwords: Optional[int]) -> None:
    """Print the static "You can enter up to ..." hint."""
    try:
        policy = policy_from_options(maxlength=maxlength, maxwords=maxwords)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    if not policy.is_limited:
        click.echo("Error: a positive --maxlength or --maxwords is required.", err=True)
        sys.exit(2)

    click.echo(format_fallback_hint(policy.limit, policy.unit))


@cli.command()
@click.pass_obj
@click.argument('path', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--maxlength', type=int, help='Maximum number of characters')
@click.option('--maxwords', type=int, help='Maximum number of words (overrides --maxlength)')
@click.option('--threshold', type=int, help='Percentage of the limit before feedback shows')
@click.option('--duration', type=float, help='Stop after this many seconds (default: until Ctrl-C)')
def watch(settings: Settings, path: Path, maxlength: Optional[int], maxwords: Optional[int],
          threshold: Optional[int], duration: Optional[float]) -> None:
    """Watch PATH and report feedback whenever its content changes."""
    try:
        source = FileTextSource(path)
    except UnicodeDecodeError:
        click.echo(f"Error: {path} is not valid UTF-8 text.", err=True)
        sys.exit(2)
    engine = CharacterCountEngine(settings=settings)

    def report(result: CountResult, message: Message, visible: bool) -> None:
        marker = "!" if message.is_over_limit else ("*" if visible else " ")
        click.echo(f"[{marker}] {result.count:>6}  {message.text}")

    engine.subscribe(report)
    try:
        handle = engine.bind(source, _options(maxlength, maxwords, threshold))
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    if not handle.policy.is_limited:
        engine.unbind(handle)
        click.echo("Error: a positive --maxlength or --maxwords is required.", err=True)
        sys.exit(2)

    source.focus()
    click.echo(f"Watching {path} (poll every {settings.poll_interval_ms} ms, Ctrl-C to stop)")
    started = time.monotonic()
    try:
        while duration is None or time.monotonic() - started < duration:
            time.sleep(0.1)
    except KeyboardInterrupt:
        pass
    finally:
        source.blur()
        engine.unbind(handle)


def main() -> None:
    cli()


if __name__ == '__main__':
    main()
