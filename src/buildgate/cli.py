"""CLI interface for buildgate using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from buildgate import __description__, __version__
from buildgate.config import BuildgateConfig, load_config
from buildgate.console import ConsolePrompt
from buildgate.errors import ScenarioError
from buildgate.models import CareerScenario, load_scenario
from buildgate.pipeline import Admitted, PipelineRun, ValidationPipeline
from buildgate.services import CareerState, CatalogPartInspector, CareerTechTree, build_services

app = typer.Typer(
    name="buildgate",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"buildgate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """buildgate - admission checks for the vessel build list."""


def _configure_logging(config: BuildgateConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else _LOG_LEVELS.get(config.logging.level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_inputs(scenario_path: Path, config_path: Path | None) -> tuple[BuildgateConfig, CareerScenario]:
    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        scenario = load_scenario(scenario_path)
    except ScenarioError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    return config, scenario


def _ask_operator(prompt: ConsolePrompt) -> None:
    options = prompt.open_options
    while True:
        answer = typer.prompt(f"Choose an option (1-{len(options)})", default="1")
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            prompt.choose(options[int(answer) - 1].key)
            return
        console.print(f"[yellow]Warning:[/yellow] '{answer}' is not a valid option")


def _output_run_table(run: PipelineRun, state: CareerState) -> None:
    table = Table(title=f"Build list admission: {run.artifact.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    outcome = run.outcome
    if isinstance(outcome, Admitted):
        table.add_row("Status", "[green]admitted[/green]")
    elif outcome is not None:
        table.add_row("Status", "[red]rejected[/red]")
        table.add_row("Reason", outcome.reason.value)
        table.add_row("Step", outcome.step)
        if outcome.message:
            table.add_row("Detail", outcome.message)
    else:
        table.add_row("Status", f"[yellow]{run.state.value}[/yellow]")

    table.add_row("Completed steps", ", ".join(run.completed_steps) or "-")
    table.add_row("Funds remaining", f"{state.funds:,.2f}")
    console.print(table)


@app.command()
def check(
    scenario: Annotated[
        Path,
        typer.Argument(help="Path to a scenario JSON file")
    ],
    decision: Annotated[
        str,
        typer.Option("--decision", "-d", help="Answer to the part unlock dialog: ask, unlock, cancel (default: ask)")
    ] = "ask",
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .buildgate.json)")
    ] = None,
    editing: Annotated[
        bool,
        typer.Option("--editing", help="Treat the vessel as an edit of a queued ship")
    ] = False,
    skip_facility: Annotated[bool, typer.Option("--skip-facility", help="Disable the facility check")] = False,
    skip_funds: Annotated[bool, typer.Option("--skip-funds", help="Disable the funds check")] = False,
    skip_parts: Annotated[bool, typer.Option("--skip-parts", help="Disable the part availability check")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
) -> None:
    """Check whether a vessel may be added to the build list."""
    valid_decisions = ["ask", "unlock", "cancel"]
    valid_formats = ["table", "json"]

    if decision not in valid_decisions:
        console.print(f"[red]Error:[/red] Invalid decision '{decision}'. Must be one of: {', '.join(valid_decisions)}")
        raise typer.Exit(1)

    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    buildgate_config, career_scenario = _load_inputs(scenario, config)
    _configure_logging(buildgate_config, verbose)

    try:
        artifact = career_scenario.build_artifact()
    except ScenarioError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    validation = buildgate_config.validation.model_copy(update={
        "check_facility_requirements": buildgate_config.validation.check_facility_requirements and not skip_facility,
        "check_available_funds": buildgate_config.validation.check_available_funds and not skip_funds,
        "check_part_availability": buildgate_config.validation.check_part_availability and not skip_parts,
    })

    state = CareerState.from_scenario(career_scenario)
    prompt = ConsolePrompt(console, quiet=format == "json")
    services = build_services(state, career_scenario.facility, prompt)
    pipeline = ValidationPipeline(services, buildgate_config.messages)

    run = pipeline.run(artifact, validation, editing=editing or career_scenario.editing)

    if run.awaiting_decision:
        if decision == "ask" and format == "json":
            console.print(
                f"[red]Error:[/red] '{escape(run.pending.title)}' needs an answer; "
                "use --decision unlock or --decision cancel with --format json"
            )
            raise typer.Exit(1)
        if decision == "ask":
            _ask_operator(prompt)
        else:
            prompt.choose(decision)

    if format == "json":
        data = run.to_dict()
        data["prompts"] = [event.to_dict() for event in prompt.events]
        data["funds_remaining"] = state.funds
        console.print_json(jsonlib.dumps(data))
    else:
        _output_run_table(run, state)

    if not isinstance(run.outcome, Admitted):
        raise typer.Exit(1)


@app.command()
def parts(
    scenario: Annotated[
        Path,
        typer.Argument(help="Path to a scenario JSON file")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
) -> None:
    """Show how each part of the vessel is classified."""
    if format not in ["table", "json"]:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: table, json")
        raise typer.Exit(1)

    try:
        career_scenario = load_scenario(scenario)
        artifact = career_scenario.build_artifact()
    except ScenarioError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    state = CareerState.from_scenario(career_scenario)
    inspector = CatalogPartInspector(state, CareerTechTree(state))

    rows = [
        {
            "part": part.name,
            "title": part.display_name,
            "techRequired": part.tech_required,
            "status": inspector.classify(part),
            "count": count,
            "cost": part.cost,
            "entryCost": part.entry_cost,
        }
        for part, count in sorted(artifact.part_counts().items(), key=lambda item: item[0].name)
    ]

    if format == "json":
        console.print_json(jsonlib.dumps({"vessel": artifact.name, "parts": rows}))
        return

    status_styles = {"available": "green", "experimental": "yellow", "locked": "red"}
    table = Table(title=f"Parts of {artifact.name}")
    table.add_column("Part", style="cyan")
    table.add_column("Tech")
    table.add_column("Status")
    table.add_column("Count", justify="right")
    table.add_column("Cost", justify="right")
    table.add_column("Entry cost", justify="right")
    for row in rows:
        style = status_styles[row["status"]]
        table.add_row(
            row["title"],
            row["techRequired"],
            f"[{style}]{row['status']}[/{style}]",
            str(row["count"]),
            f"{row['cost']:,.0f}",
            f"{row['entryCost']:,.0f}",
        )
    console.print(table)
    console.print(f"Total cost: {artifact.total_cost():,.0f}")


if __name__ == "__main__":
    app()
