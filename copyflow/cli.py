"""Command line interface for inspecting copyflow progress and output."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from copyflow import get_repository
from copyflow.parsing import SCHEMAS, ParseEmpty, assemble, to_editor_html
from copyflow.sequencer import GenerationProgress
from copyflow.sequencer.transitions import progress_summary
from copyflow.workflows import WORKFLOWS

app = typer.Typer(help="CLI for copyflow generation workflows")

# Command groups
progress_app = typer.Typer(help="Commands for managing stored progress")
workflows_app = typer.Typer(help="Commands for inspecting workflow definitions")

app.add_typer(progress_app, name="progress")
app.add_typer(workflows_app, name="workflows")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Logging level for copyflow"),
) -> None:
    """Copyflow CLI entry point."""
    logging.basicConfig(level=log_level.upper())


def _load_progress(document_id: str) -> GenerationProgress | None:
    repo = get_repository()
    payload = asyncio.run(repo.load(document_id))
    if payload is None:
        return None
    return GenerationProgress.from_json(payload)


@progress_app.command("list")
def progress_list() -> None:
    """
    List documents with stored progress and their state.

    Example:
        copyflow progress list
        # Output: doc-123    brochure-multi-section    in_progress    2/6
    """
    repo = get_repository()
    document_ids = asyncio.run(repo.list_documents())
    if not document_ids:
        typer.echo("No progress found")
        return
    for document_id in document_ids:
        try:
            progress = _load_progress(document_id)
        except ValidationError:
            typer.echo(f"{document_id}\t(unreadable)")
            continue
        if progress is None:
            continue
        typer.echo(
            f"{document_id}\t{progress.workflow_kind}\t{progress.state.value}\t"
            f"{progress.current_step_index}/{progress.total_steps}"
        )


@progress_app.command("show")
def progress_show(document_id: str) -> None:
    """
    Show the stored progress for a document.

    Displays the workflow state, the current step and every step record with
    its completion time and whether it was edited after generation.

    Args:
        document_id: Document to inspect (get from 'progress list')
    """
    try:
        progress = _load_progress(document_id)
    except ValidationError as exc:
        typer.secho(f"Stored progress is invalid: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if progress is None:
        typer.echo("Progress not found")
        raise typer.Exit(code=1)

    typer.echo(f"Document {document_id}: {progress.workflow_kind} ({progress.state.value})")
    definition = WORKFLOWS.get(progress.workflow_kind)
    if definition is not None:
        summary = progress_summary(progress, definition)
        typer.echo(f"Completed {summary.completed}/{summary.total} ({summary.percent}%)")
        if summary.current_step_name:
            typer.echo(f"Current step: {summary.current_step_name}")
        if summary.skipped_step_ids:
            typer.echo(f"Skipped: {', '.join(summary.skipped_step_ids)}")
        step_ids = definition.step_ids
    else:
        typer.echo(f"Step {progress.current_step_index}/{progress.total_steps}")
        step_ids = list(progress.step_records)

    for step_id in step_ids:
        record = progress.step_records.get(step_id)
        if record is None:
            continue
        flag = " (edited)" if record.was_modified else ""
        typer.echo(f"- {step_id}: {record.completed_at.isoformat()}{flag}")


@progress_app.command("discard")
def progress_discard(document_id: str) -> None:
    """
    Delete the stored progress for a document.

    Generated document content is not affected; the workflow simply can no
    longer be resumed.
    """
    repo = get_repository()
    if not asyncio.run(repo.delete(document_id)):
        typer.echo("Progress not found")
        raise typer.Exit(code=1)
    typer.echo(f"Discarded progress for {document_id}")


@workflows_app.command("list")
def workflows_list() -> None:
    """List registered workflow definitions and their steps."""
    for kind, definition in sorted(WORKFLOWS.items()):
        typer.echo(f"{kind} - {definition.name}")
        typer.echo(f"  Steps: {', '.join(definition.step_ids)}")


@app.command("parse")
def parse(
    path: Path,
    schema: str = typer.Option("generic", help="Tag schema: generic or campaign"),
    expected: Optional[int] = typer.Option(None, help="Expected number of items"),
    as_html: bool = typer.Option(False, "--html", help="Render editor HTML"),
) -> None:
    """
    Parse tagged model output from a file into a structured document.

    Example:
        copyflow parse output.txt --schema campaign --expected 12
        # Output: [pre-launch] Pre-Launch (Day -14 to -1)
        #           [email] Email
        #             - Teaser email (Day -14): 142 words, 861 chars
    """
    document_schema = SCHEMAS.get(schema)
    if document_schema is None:
        typer.secho(f"Unknown schema: {schema}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if not path.exists():
        typer.secho("Specified path does not exist", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    result = assemble(path.read_text(), document_schema, expected_items=expected)
    if isinstance(result, ParseEmpty):
        typer.secho(result.reason, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    for warning in result.warnings:
        typer.secho(f"Warning: {warning}", fg=typer.colors.YELLOW)
    if as_html:
        typer.echo(to_editor_html(result))
        return
    for section in result.sections:
        ordering = f" ({section.ordering})" if section.ordering else ""
        typer.echo(f"[{section.id}] {section.name}{ordering}")
        for group in section.groups:
            typer.echo(f"  [{group.id}] {group.name}")
            for item in group.items:
                label = f" ({item.ordering_label})" if item.ordering_label else ""
                typer.echo(
                    f"    - {item.title}{label}: {item.word_count} words, {item.char_count} chars"
                )
    typer.echo(f"Total items: {result.total_items}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
