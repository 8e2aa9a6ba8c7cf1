from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EngineSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    start_health: int = Field(default=100, ge=1, le=100)
    start_hunger: int = Field(default=50, ge=0, le=100)
    start_energy: int = Field(default=100, ge=0, le=100)
    start_reputation: int = Field(default=50, ge=0, le=100)
    inventory_capacity: int = Field(default=10, ge=1, le=64)
    follower_base_loyalty: int = Field(default=50, ge=0, le=100)
    daily_hunger: int = Field(default=5, ge=0, le=100)
    daily_energy: int = Field(default=5, ge=0, le=100)
    starvation_damage: int = Field(default=10, ge=0, le=100)
    hunter_hunger_relief: int = Field(default=2, ge=0, le=100)
    random_event_chance: float = Field(default=0.35, ge=0.0, le=1.0)
    recruit_reputation: int = Field(default=60, ge=0, le=100)
    timeline_max: int = Field(default=200, ge=10, le=5000)
    seed: int | str = 1337

    def as_dict(self) -> dict[str, Any]:
        return json.loads(self.model_dump_json())


def merge_settings(payload: dict[str, Any] | None) -> EngineSettings:
    if not isinstance(payload, dict):
        payload = {}
    return EngineSettings.model_validate(payload)


def load_settings(path: Path | str | None) -> EngineSettings:
    """Read engine settings from a JSON file, falling back to defaults.

    A missing or unreadable file yields the defaults. Values that parse but
    fall outside their allowed range raise ``pydantic.ValidationError``.
    """
    if path is None:
        return EngineSettings()
    settings_path = Path(path)
    if not settings_path.exists():
        return EngineSettings()
    try:
        payload = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        payload = {}
    return merge_settings(payload)


def save_settings(settings: EngineSettings, path: Path | str) -> None:
    settings_path = Path(path)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    settings_path.write_text(json.dumps(settings.as_dict(), indent=2), encoding="utf-8")
