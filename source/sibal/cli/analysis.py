"""This module defines the 'analysis' command group for the SIBAL CLI.

Each command is a thin wrapper over one tool of the registry, so the CLI and
programmatic callers share the same argument validation.
"""

from typing import Any, TextIO

import click
from sibal.cli.output import echo_result, parse_json_option
from sibal.exceptions.analysis import AnalysisError
from sibal.models.enums import DeadlineType, DocumentType
from sibal.services.deadline_monitor import MAX_DAYS_AHEAD, MIN_DAYS_AHEAD


def run_tool(ctx: click.Context, name: str, args: dict[str, Any]) -> None:
    """Runs a tool and prints its result, aborting on analyzer errors.

    Args:
        ctx: The click context.
        name: The tool name.
        args: The tool arguments.
    """
    try:
        result = ctx.obj.registry.call_tool(name, args)
    except AnalysisError as e:
        click.secho(f"An error occurred: {e}", fg="red", err=True)
        raise click.Abort()
    echo_result(ctx, result)


@click.group("analysis")
def analysis_group() -> None:
    """Groups commands that analyze procurement notices."""
    pass


@analysis_group.command("risk")
@click.option("--notice-id", required=True, help="The ID of the notice to classify.")
@click.option("--company-profile", default=None, help="A free-text description of the bidding company.")
@click.pass_context
def risk(ctx: click.Context, notice_id: str, company_profile: str | None) -> None:
    """Classifies the participation risk of a notice.

    Args:
        ctx: The click context.
        notice_id: The ID of the notice to classify.
        company_profile: A free-text description of the bidding company.
    """
    run_tool(ctx, "risk_classifier", {"notice_id": notice_id, "company_profile": company_profile})


@analysis_group.command("summarize")
@click.option("--notice-id", required=True, help="The ID of the notice to summarize.")
@click.option("--focus", "focus_areas", multiple=True, help="A topic the summary should stress. Repeatable.")
@click.pass_context
def summarize(ctx: click.Context, notice_id: str, focus_areas: tuple[str, ...]) -> None:
    """Writes an executive summary of a notice.

    Args:
        ctx: The click context.
        notice_id: The ID of the notice to summarize.
        focus_areas: Topics the summary should stress.
    """
    run_tool(ctx, "summarize_notice", {"notice_id": notice_id, "focus_areas": list(focus_areas)})


@analysis_group.command("document")
@click.option(
    "--document-type",
    type=click.Choice([document_type.value for document_type in DocumentType]),
    required=True,
    help="The kind of document.",
)
@click.option("--url", "document_url", default=None, help="The URL of a PDF, DOCX or XLSX document.")
@click.option(
    "--file",
    "content_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="A plain-text file to process instead of downloading a document.",
)
@click.option("--notice-id", default=None, help="The notice the document belongs to; enables persistence.")
@click.option("--no-tables", is_flag=True, help="Skip table extraction.")
@click.option("--requirements", is_flag=True, help="Also extract the participation requirements.")
@click.pass_context
def document(
    ctx: click.Context,
    document_type: str,
    document_url: str | None,
    content_file: TextIO | None,
    notice_id: str | None,
    no_tables: bool,
    requirements: bool,
) -> None:
    """Extracts text, tables, requirements and key information from a document.

    Args:
        ctx: The click context.
        document_type: The kind of document.
        document_url: The URL of the document.
        content_file: A plain-text file with the document content.
        notice_id: The notice the document belongs to.
        no_tables: Whether to skip table extraction.
        requirements: Whether to extract requirements.
    """
    if not document_url and content_file is None:
        raise click.UsageError("Either --url or --file must be provided.")
    args = {
        "document_type": document_type,
        "document_url": document_url,
        "content": content_file.read() if content_file is not None else None,
        "notice_id": notice_id,
        "extract_tables": not no_tables,
        "extract_requirements": requirements,
    }
    run_tool(ctx, "process_document", args)


@analysis_group.command("deadlines")
@click.option("--company-id", required=True, help="The company the alerts are for.")
@click.option(
    "--days-ahead",
    type=click.IntRange(MIN_DAYS_AHEAD, MAX_DAYS_AHEAD),
    default=None,
    help="How many days ahead to look. Defaults to the configured window.",
)
@click.option(
    "--type",
    "deadline_types",
    type=click.Choice([deadline_type.value for deadline_type in DeadlineType]),
    multiple=True,
    help="A deadline type to monitor. Repeatable.",
)
@click.pass_context
def deadlines(ctx: click.Context, company_id: str, days_ahead: int | None, deadline_types: tuple[str, ...]) -> None:
    """Lists upcoming deadlines with alerts, checklists and calendar events.

    Args:
        ctx: The click context.
        company_id: The company the alerts are for.
        days_ahead: How many days ahead to look.
        deadline_types: The deadline types to monitor.
    """
    args: dict[str, Any] = {"company_id": company_id, "days_ahead": days_ahead}
    if deadline_types:
        args["deadline_types"] = list(deadline_types)
    run_tool(ctx, "monitor_deadlines", args)


@analysis_group.command("insights")
@click.option("--notice-id", required=True, help="The ID of the notice the proposal targets.")
@click.option("--company-profile", default=None, help="The company profile as a JSON object.")
@click.option("--historical-proposals", default=None, help="Past proposals as a JSON array.")
@click.option("--competitors", default=None, help="Known competitors as a JSON array.")
@click.pass_context
def insights(
    ctx: click.Context,
    notice_id: str,
    company_profile: str | None,
    historical_proposals: str | None,
    competitors: str | None,
) -> None:
    """Generates strategic insights for a bid proposal.

    Args:
        ctx: The click context.
        notice_id: The ID of the notice the proposal targets.
        company_profile: The company profile as JSON.
        historical_proposals: Past proposals as JSON.
        competitors: Known competitors as JSON.
    """
    args: dict[str, Any] = {
        "notice_id": notice_id,
        "company_profile": parse_json_option(company_profile, "--company-profile"),
    }
    if historical_proposals is not None:
        args["historical_proposals"] = parse_json_option(historical_proposals, "--historical-proposals")
    if competitors is not None:
        args["competitors"] = parse_json_option(competitors, "--competitors")
    run_tool(ctx, "generate_proposal_insights", args)
