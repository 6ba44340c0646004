"""Command-line entrypoints for gasreactor."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Dict

import typer

from gasreactor.config import Scenario, default_scenario, load_scenario
from gasreactor.simulation import Simulation

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log reactions and control changes.")] = False,
) -> None:
    """Particle gas reactor simulation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _simulate(scenario: Scenario, ticks: int, sample_every: int) -> Dict[str, Any]:
    simulation = Simulation.from_scenario(scenario)
    species = simulation.species()

    data: Dict[str, Any] = {
        "tick": [],
        "species": {name: [] for name in species},
    }

    def sample() -> None:
        counts = simulation.species_counts()
        data["tick"].append(simulation.tick_count)
        for name in species:
            data["species"][name].append(counts.get(name, 0))

    for _ in range(ticks):
        simulation.tick()
        if simulation.tick_count % sample_every == 0:
            sample()
    if not data["tick"] or data["tick"][-1] != simulation.tick_count:
        sample()

    data["final"] = {name: series[-1] for name, series in data["species"].items()}
    data["temperature"] = simulation.temperature
    data["average_speed"] = simulation.average_speed()
    data["reactions"] = [reaction.formula for reaction in simulation.reactions]
    return data


def _emit(data: Dict[str, Any], output: Path | None) -> None:
    json_output = json.dumps(data, indent=2)
    typer.echo(json_output)

    if output:
        with open(output, "w") as f:
            f.write(json_output)


@app.command()
def run(
    scenario_file: Annotated[
        Path, typer.Argument(help="Path to JSON scenario file.")
    ],
    ticks: Annotated[int, typer.Option(min=0, help="Number of ticks to simulate.")] = 600,
    sample_every: Annotated[int, typer.Option(min=1, help="Record species counts every N ticks.")] = 10,
    output: Annotated[
        Path | None, typer.Option(help="Path to save output JSON.")
    ] = None,
) -> None:
    """Run a headless simulation from a scenario file."""
    try:
        scenario = load_scenario(scenario_file)
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    _emit(_simulate(scenario, ticks, sample_every), output)


@app.command()
def demo(
    ticks: Annotated[int, typer.Option(min=0, help="Number of ticks to simulate.")] = 600,
    count: Annotated[int, typer.Option(min=0, help="Initial number of A particles.")] = 40,
    seed: Annotated[int | None, typer.Option(help="Random seed.")] = None,
    sample_every: Annotated[int, typer.Option(min=1, help="Record species counts every N ticks.")] = 10,
    output: Annotated[
        Path | None, typer.Option(help="Path to save output JSON.")
    ] = None,
) -> None:
    """Run the reversible 2A <=> 2B demo headless."""
    _emit(_simulate(default_scenario(count, seed), ticks, sample_every), output)


@app.command()
def gui(
    scenario_file: Annotated[
        Path | None, typer.Argument(help="Optional JSON scenario file.")
    ] = None,
) -> None:
    """Open the interactive window."""
    from gasreactor.gui.app import main as gui_main

    gui_main(scenario_file)
