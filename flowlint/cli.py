"""Command line interface for FlowLint."""

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from flowlint.config import settings
from flowlint.exceptions import FlowLintException
from flowlint.expressions import (
    RECOGNIZED_VARIABLES,
    ValidationContext,
    ValidationResult,
    expression_validator,
)
from flowlint.logs import setup_logging
from flowlint.workflows import WorkflowExpressionValidator, load_json, load_workflow

app = typer.Typer(
    name="flowlint",
    help="FlowLint - static validation of workflow node expressions",
    add_completion=False,
)

console = Console()


def _build_context(
    nodes: Optional[List[str]], has_input: bool, in_loop: bool
) -> ValidationContext:
    return ValidationContext(
        available_nodes=nodes or [],
        has_input_data=has_input,
        is_in_loop=in_loop,
    )


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(code=1)


def _print_result(result: ValidationResult) -> None:
    """Print errors, warnings and usage of a validation result."""
    if result.errors or result.warnings:
        table = Table(title="Expression Problems")
        table.add_column("Severity", style="bold")
        table.add_column("Message")
        for error in result.errors:
            table.add_row("[red]error[/red]", escape(error))
        for warning in result.warnings:
            table.add_row("[yellow]warning[/yellow]", escape(warning))
        console.print(table)

    if result.used_variables:
        console.print(f"Variables: {', '.join(sorted(result.used_variables))}")
    if result.used_nodes:
        console.print(f"Nodes: {escape(', '.join(sorted(result.used_nodes)))}")

    if result.valid:
        console.print("[green]✅ Valid[/green]")
    else:
        console.print(f"[red]❌ Invalid ({len(result.errors)} error(s))[/red]")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging before running a command."""
    if verbose:
        settings.log_level = "DEBUG"
    setup_logging()


@app.command("version")
def version():
    """Show version information."""
    version_info = f"""
FlowLint v{settings.app_version}
Static validation of workflow node expressions

Environment: {settings.environment}
Python: {sys.version}
"""
    console.print(
        Panel(
            version_info.strip(),
            title="Version Information",
            border_style="green",
        )
    )


@app.command("config")
def show_config():
    """Show current configuration."""
    config_table = Table(title="FlowLint Configuration")

    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="green")

    config_items = [
        ("App Name", settings.app_name),
        ("Version", settings.app_version),
        ("Environment", settings.environment),
        ("Debug", str(settings.debug)),
        ("Log Level", settings.log_level),
        ("Max Parameter Depth", str(settings.max_parameter_depth)),
        ("Expression Heavy Threshold", str(settings.expression_heavy_threshold)),
    ]

    for setting, value in config_items:
        config_table.add_row(setting, value)

    console.print(config_table)


@app.command("variables")
def list_variables():
    """List the recognized workflow variables."""
    table = Table(title="Recognized Variables")
    table.add_column("Variable", style="cyan")
    table.add_column("Description", style="dim")

    for token, description in RECOGNIZED_VARIABLES.items():
        table.add_row(token, description)

    console.print(table)


@app.command("check")
def check_expression(
    text: str = typer.Argument(..., help="Text containing {{ }} expressions"),
    nodes: Optional[List[str]] = typer.Option(None, "--node", "-n", help="Node name present in the workflow"),
    has_input: bool = typer.Option(False, "--input/--no-input", help="Whether the node has input data"),
    in_loop: bool = typer.Option(False, "--loop", help="Whether the node runs inside a loop"),
):
    """Validate a single text value."""
    context = _build_context(nodes, has_input, in_loop)
    result = expression_validator.validate_expression(text, context)
    _print_result(result)
    if not result.valid:
        raise typer.Exit(code=1)


@app.command("params")
def check_parameters(
    path: Path = typer.Argument(..., help="JSON file with node parameters"),
    nodes: Optional[List[str]] = typer.Option(None, "--node", "-n", help="Node name present in the workflow"),
    has_input: bool = typer.Option(False, "--input/--no-input", help="Whether the node has input data"),
    in_loop: bool = typer.Option(False, "--loop", help="Whether the node runs inside a loop"),
):
    """Validate every expression in a parameter file."""
    try:
        parameters = load_json(path)
    except FlowLintException as e:
        _fail(str(e))
    context = _build_context(nodes, has_input, in_loop)
    result = expression_validator.validate_node_expressions(parameters, context)
    _print_result(result)
    if not result.valid:
        raise typer.Exit(code=1)


@app.command("workflow")
def check_workflow(
    path: Path = typer.Argument(..., help="Workflow JSON file"),
):
    """Validate expressions in every enabled node of a workflow."""
    try:
        workflow = load_workflow(path)
    except FlowLintException as e:
        _fail(str(e))
    report = WorkflowExpressionValidator().validate(workflow)

    summary = Table(title=f"Workflow: {workflow.name or path.name}")
    summary.add_column("Statistic", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Total nodes", str(report.statistics.total_nodes))
    summary.add_row("Enabled nodes", str(report.statistics.enabled_nodes))
    summary.add_row("Expressions validated", str(report.statistics.expressions_validated))
    summary.add_row("Errors", str(len(report.errors)))
    summary.add_row("Warnings", str(len(report.warnings)))
    console.print(summary)

    if report.errors or report.warnings:
        issues = Table(title="Expression Problems")
        issues.add_column("Node", style="cyan")
        issues.add_column("Message")
        for issue in report.errors:
            issues.add_row(escape(issue.node or "workflow"), f"[red]{escape(issue.message)}[/red]")
        for issue in report.warnings:
            issues.add_row(escape(issue.node or "workflow"), f"[yellow]{escape(issue.message)}[/yellow]")
        console.print(issues)

    for suggestion in report.suggestions:
        console.print(f"💡 {escape(suggestion)}")

    if report.valid:
        console.print("[green]✅ Workflow expressions are valid[/green]")
    else:
        console.print("[red]❌ Workflow expressions have errors[/red]")
        raise typer.Exit(code=1)


def main():
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except FlowLintException as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
