from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Literal, Optional

import typer
from rich.console import Console
from rich.table import Table

from lone_wolf.app.services.logger import configure_logging
from lone_wolf.core.engine import GameEngine
from lone_wolf.core.errors import GameError
from lone_wolf.core.models import LogEntry
from lone_wolf.core.settings import load_settings
from lone_wolf.core.story import Side

app = typer.Typer(add_completion=False, help="Run a deterministic headless playthrough of the story core.")
console = Console()

AutopickPolicy = Literal["left", "right", "random"]
LOW_ENERGY = 20


def _normalize_seed(raw_seed: str) -> int | str:
    try:
        return int(raw_seed)
    except ValueError:
        return raw_seed


def _open_sides(engine: GameEngine) -> list[Side]:
    node = engine.get_story().get_current_node()
    inventory = engine.get_player().inventory
    sides: list[Side] = []
    for side in ("left", "right"):
        if node.child(side) is None:
            continue
        required = node.requirement(side)
        if required and not inventory.has_item(required):
            continue
        sides.append(side)
    return sides


def _pick_side(policy: AutopickPolicy, sides: list[Side], engine: GameEngine) -> Side:
    if policy == "random":
        return sides[engine.rng.next_int(0, len(sides))]
    if policy in sides:
        return policy
    return sides[0]


def play_headless(engine: GameEngine, steps: int, policy: AutopickPolicy) -> int:
    """Drive ``engine`` for up to ``steps`` turns; returns the number of turns taken."""
    taken = 0
    while taken < steps and not engine.is_over():
        taken += 1
        player = engine.get_player()
        if player.hunger >= 70:
            food = next((item for item in player.inventory if item.kind == "food"), None)
            if food is not None:
                engine.use_item(food.name)
        sides = _open_sides(engine)
        if player.energy <= LOW_ENERGY or not sides:
            engine.queue_action("rest")
            engine.perform_next_action()
            continue
        engine.make_choice(_pick_side(policy, sides, engine))
    while engine.phase == "event_triggered" and not engine.is_over():
        engine.update_game_loop()
    return taken


def _state_signature_payload(engine: GameEngine, logs: list[LogEntry]) -> dict:
    save = engine.to_save_data()
    return {
        "session": save.model_dump(mode="json"),
        "timeline": [entry.to_dict() for entry in logs],
    }


@app.command()
def main(
    seed: str = typer.Option("1337", "--seed", help="Seed value (int or string)."),
    steps: int = typer.Option(20, "--steps", min=1, help="Max number of turns."),
    autopick: AutopickPolicy = typer.Option("random", "--autopick", help="Choice policy: left|right|random."),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Engine settings JSON file."),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Write latest.log and gameplay.log here."),
    save_path: Optional[Path] = typer.Option(None, "--save", help="Save the final session to this file."),
) -> None:
    gameplay_logger = None
    if log_dir is not None:
        bundle = configure_logging(log_dir)
        gameplay_logger = bundle.gameplay

    try:
        settings = load_settings(settings_path)
    except ValueError as exc:
        console.print(f"[bold red]Settings rejected:[/bold red] {exc}")
        raise typer.Exit(1) from exc

    engine = GameEngine(settings=settings, seed=_normalize_seed(seed))
    engine.init_game()
    try:
        turns = play_headless(engine, steps, autopick)
    except GameError as exc:
        logging.getLogger("lone_wolf").exception("Simulation stopped.")
        console.print(f"[bold red]Simulation stopped:[/bold red] {exc}")
        raise typer.Exit(1) from exc

    logs = engine.timeline
    for entry in logs:
        console.print(entry.format(), markup=False)
        if gameplay_logger is not None:
            gameplay_logger.info("%s", entry.format())

    player = engine.get_player()
    node = engine.get_story().get_current_node()
    summary = Table(title="Playthrough Summary")
    summary.add_column("Field", style="cyan", no_wrap=True)
    summary.add_column("Value", style="white")
    summary.add_row("Seed", str(engine.rng.seed))
    summary.add_row("Policy", autopick)
    summary.add_row("Turns", f"{turns}/{steps}")
    summary.add_row("Day", str(engine.get_day()))
    summary.add_row("Phase", engine.phase)
    summary.add_row(
        "Stats",
        ", ".join(f"{name}={value}" for name, value in player.stats().items()),
    )
    summary.add_row("Story Node", f"{node.id}: {node.ending_description or node.scenario_text}")
    summary.add_row("Inventory", ", ".join(item.name for item in player.inventory) or "-")
    summary.add_row(
        "Pack",
        ", ".join(f"{follower.name} ({follower.role})" for follower in player.followers) or "-",
    )
    summary.add_row("Undo Depth", str(len(engine.undo_history)))
    console.print()
    console.print(summary)

    if save_path is not None:
        written = engine.save_to_file(save_path)
        console.print(f"Saved session to {written}")

    payload = _state_signature_payload(engine, logs)
    signature = hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf-8")).hexdigest()[:16]
    console.print(f"\n[bold green]Deterministic signature:[/bold green] {signature}")


if __name__ == "__main__":
    app()
