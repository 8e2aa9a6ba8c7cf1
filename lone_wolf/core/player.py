from __future__ import annotations

from dataclasses import dataclass, field

from .inventory import Inventory
from .models import Follower, FollowerRole, PlayerState, StatDeltas, clamp_stat
from .settings import EngineSettings

DEFAULT_LOYALTY = 50


@dataclass(slots=True)
class Player:
    health: int = 100
    hunger: int = 50
    energy: int = 100
    reputation: int = 50
    inventory: Inventory = field(default_factory=Inventory)
    followers: list[Follower] = field(default_factory=list)
    base_loyalty: int = DEFAULT_LOYALTY

    def __post_init__(self) -> None:
        self.health = clamp_stat(self.health)
        self.hunger = clamp_stat(self.hunger)
        self.energy = clamp_stat(self.energy)
        self.reputation = clamp_stat(self.reputation)

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> "Player":
        return cls(
            health=settings.start_health,
            hunger=settings.start_hunger,
            energy=settings.start_energy,
            reputation=settings.start_reputation,
            inventory=Inventory(capacity=settings.inventory_capacity),
            base_loyalty=settings.follower_base_loyalty,
        )

    @classmethod
    def from_state(cls, state: PlayerState, settings: EngineSettings | None = None) -> "Player":
        settings = settings or EngineSettings()
        inventory = Inventory(capacity=settings.inventory_capacity)
        inventory.replace_contents(list(state.inventory))
        return cls(
            health=state.health,
            hunger=state.hunger,
            energy=state.energy,
            reputation=state.reputation,
            inventory=inventory,
            followers=[follower.model_copy() for follower in state.followers],
            base_loyalty=settings.follower_base_loyalty,
        )

    def to_state(self) -> PlayerState:
        return PlayerState(
            health=self.health,
            hunger=self.hunger,
            energy=self.energy,
            reputation=self.reputation,
            inventory=list(self.inventory),
            followers=[follower.model_copy() for follower in self.followers],
        )

    def stats(self) -> dict[str, int]:
        return {
            "health": self.health,
            "hunger": self.hunger,
            "energy": self.energy,
            "reputation": self.reputation,
        }

    def update_stats(self, health: int = 0, hunger: int = 0, energy: int = 0, reputation: int = 0) -> None:
        self.health = clamp_stat(self.health + health)
        self.hunger = clamp_stat(self.hunger + hunger)
        self.energy = clamp_stat(self.energy + energy)
        self.reputation = clamp_stat(self.reputation + reputation)

    def apply_deltas(self, deltas: StatDeltas) -> None:
        self.update_stats(
            health=deltas.health,
            hunger=deltas.hunger,
            energy=deltas.energy,
            reputation=deltas.reputation,
        )

    def is_alive(self) -> bool:
        return self.health > 0

    def rest(self) -> None:
        self.energy = clamp_stat(self.energy + 100)

    def feed(self, amount: int) -> None:
        self.hunger = clamp_stat(self.hunger - amount)

    def take_damage(self, amount: int) -> None:
        self.health = clamp_stat(self.health - amount)

    def recruit_member(self, name: str, role: FollowerRole = "none") -> Follower:
        follower = Follower(name=name, role=role, loyalty=self.base_loyalty)
        self.followers.append(follower)
        return follower

    def followers_with_role(self, role: FollowerRole) -> list[Follower]:
        return [follower for follower in self.followers if follower.role == role]
