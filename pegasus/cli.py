"""Command line interface for pegasus."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, NoReturn, Optional

import typer

from . import __version__
from . import config as config_mod
from .app import App, AppError
from .config import ConfigError
from .log import setup_logging
from .output import OutputFormat

app = typer.Typer(
    add_completion=False,
    help=f"Pegasus v{__version__}: refine transcribed text with a language model.",
)

_INPUT_HELP = "Text to refine."
_FILE_HELP = "Path to a file containing the text to refine."
_JSON_HELP = 'Print {"text": ...} instead of plain text.'
_VERBOSE_HELP = "Use verbose output."


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _check_exclusive(input_text: Optional[str], file: Optional[Path]) -> None:
    if input_text is not None and file is not None:
        raise typer.BadParameter("--input and --file are mutually exclusive.")


def _run(verbose: bool, workflow: Callable[[App], str]) -> None:
    logger = setup_logging(verbose)
    try:
        cfg = config_mod.load_config()
    except ConfigError as exc:
        _fail(f"Configuration Error: {exc}")

    logger.debug("Using LLM service at %s", cfg.llm_url)
    try:
        output = workflow(App(cfg, logger=logger))
    except AppError as exc:
        _fail(str(exc))
    typer.echo(output)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    input_text: Optional[str] = typer.Option(None, "--input", "-i", help=_INPUT_HELP),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=_FILE_HELP),
    output_json: bool = typer.Option(False, "--output-json", "-j", help=_JSON_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(f"Pegasus v{__version__}")
        raise typer.Exit()

    ctx.obj = {
        "input_text": input_text,
        "file": file,
        "output_json": output_json,
        "verbose": verbose,
    }
    root_input_given = input_text is not None or file is not None or output_json
    if ctx.invoked_subcommand == "reset-config" and root_input_given:
        raise typer.BadParameter("--input, --file and --output-json do not apply to reset-config.")
    if ctx.invoked_subcommand is not None:
        return

    _check_exclusive(input_text, file)
    output_format = OutputFormat.from_flags(output_json)
    _run(verbose, lambda runner: runner.refine_text(input_text, file, output_format))


@app.command("whisper-transcribe")
def whisper_transcribe(
    ctx: typer.Context,
    input_text: Optional[str] = typer.Option(None, "--input", "-i", help="Whisper JSON to refine."),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Path to a Whisper JSON file."),
    output_json: bool = typer.Option(False, "--output-json", "-j", help=_JSON_HELP),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0.0,
        max=1.0,
        help="Flag words whose probability is below this value (default from config).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
) -> None:
    """Refine a Whisper JSON transcription using its word confidence scores."""

    root = ctx.obj or {}
    if input_text is None and file is None:
        input_text, file = root.get("input_text"), root.get("file")
    _check_exclusive(input_text, file)
    verbose = verbose or bool(root.get("verbose"))
    output_format = OutputFormat.from_flags(output_json or bool(root.get("output_json")))
    _run(
        verbose,
        lambda runner: runner.refine_whisper_transcription(
            input_text, file, output_format, threshold=threshold
        ),
    )


@app.command("reset-config")
def reset_config(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help=_VERBOSE_HELP),
) -> None:
    """Overwrite the configuration file with default values."""

    logger = setup_logging(verbose or bool((ctx.obj or {}).get("verbose")))
    try:
        config_mod.reset_config()
    except ConfigError as exc:
        _fail(f"Failed to reset configuration: {exc}")
    logger.debug("Wrote default configuration to %s", config_mod.CONFIG_PATH)
    typer.echo("Configuration has been reset to default values.")


if __name__ == "__main__":  # pragma: no cover
    app()
