"""Command-line interface for ai-redline.

Provides commands for diffing text and reviewing suggestions in HTML documents
from the terminal.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from . import SuggestionDocument, __version__
from .assistant import EditAssistant
from .config import EditorConfig, load_config
from .diff_engine import compute_diff, compute_diff_segments, diff_stats
from .export import export_suggestions_json, export_suggestions_markdown

app = typer.Typer(
    name="ai-redline",
    help="Review AI-suggested edits in HTML documents from the command line.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"ai-redline version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging.")] = False,
) -> None:
    """Review AI-suggested edits in HTML documents from the command line."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load(file: Path) -> SuggestionDocument:
    return SuggestionDocument.from_html(file.read_text(encoding="utf-8"))


def _save(doc: SuggestionDocument, file: Path, output: Path | None) -> Path:
    output_path = output or file
    output_path.write_text(doc.to_html(), encoding="utf-8")
    return output_path


@app.command()
def diff(
    old: Annotated[Path, typer.Argument(help="Path to the original text file")],
    new: Annotated[Path, typer.Argument(help="Path to the revised text file")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    stats: Annotated[bool, typer.Option("--stats", help="Print diff statistics")] = False,
) -> None:
    """Diff two text files into suggestion markup."""
    try:
        old_text = old.read_text(encoding="utf-8")
        new_text = new.read_text(encoding="utf-8")
        markup = compute_diff(old_text, new_text)
        if output:
            output.write_text(markup, encoding="utf-8")
            typer.echo(f"Wrote suggestion markup to {output}")
        else:
            typer.echo(markup)
        if stats:
            typer.echo(str(diff_stats(compute_diff_segments(old_text, new_text))), err=True)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list")
def list_suggestions(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
) -> None:
    """List pending suggestions."""
    try:
        doc = _load(file)
        suggestions = doc.suggestions
        if not suggestions:
            typer.echo("No pending changes.")
            return
        typer.echo(f"Review ({len(suggestions)})")
        for s in suggestions:
            typer.echo(f"  {s.id:<20} {s.type.value:<10} {s.text!r}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def accept(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
    suggestion_id: Annotated[str, typer.Option("--id", "-i", help="Suggestion id to accept")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Accept one suggestion."""
    try:
        doc = _load(file)
        result = doc.accept_suggestion(doc.get_suggestion(suggestion_id))
        output_path = _save(doc, file, output)
        typer.echo(f"{result} and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def reject(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
    suggestion_id: Annotated[str, typer.Option("--id", "-i", help="Suggestion id to reject")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Reject one suggestion."""
    try:
        doc = _load(file)
        result = doc.reject_suggestion(doc.get_suggestion(suggestion_id))
        output_path = _save(doc, file, output)
        typer.echo(f"{result} and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("accept-all")
def accept_all(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Accept all suggestions in the document."""
    try:
        doc = _load(file)
        result = doc.accept_all_suggestions()
        output_path = _save(doc, file, output)
        typer.echo(f"{result} and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("reject-all")
def reject_all(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Reject all suggestions in the document."""
    try:
        doc = _load(file)
        result = doc.reject_all_suggestions()
        output_path = _save(doc, file, output)
        typer.echo(f"{result} and saved to {output_path}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def edit(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
    instruction: Annotated[str, typer.Option("--instruction", "-i", help="What to change")],
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="YAML or JSON config file")
    ] = None,
    direct: Annotated[
        bool, typer.Option("--direct", help="Apply the edit without tracking changes")
    ] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Ask the language model to edit the document."""
    try:
        editor_config = load_config(config) if config else EditorConfig()
        if direct:
            editor_config.track_changes = False
        doc = _load(file)
        assistant = EditAssistant.from_config(doc, editor_config)
        assistant.request_edit(instruction)
        output_path = _save(doc, file, output)
        typer.echo(f"{assistant.history[-1].content} Saved to {output_path}")
        if editor_config.track_changes:
            typer.echo(f"Pending suggestions: {len(doc.suggestions)}")
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def export(
    file: Annotated[Path, typer.Argument(help="Path to the HTML document")],
    format: Annotated[
        str, typer.Option("--format", "-f", help="Report format: json or markdown")
    ] = "json",
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Export a report of pending suggestions."""
    try:
        doc = _load(file)
        if format == "json":
            report = export_suggestions_json(doc)
        elif format in ("markdown", "md"):
            report = export_suggestions_markdown(doc)
        else:
            typer.echo(f"Error: Unsupported format: {format}", err=True)
            raise typer.Exit(1)
        if output:
            output.write_text(report, encoding="utf-8")
            typer.echo(f"Exported report to {output}")
        else:
            typer.echo(report)
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
