from __future__ import annotations

from lone_wolf.core.models import StatDeltas
from lone_wolf.core.player import Player
from lone_wolf.core.rng import DeterministicRNG
from lone_wolf.core.settings import EngineSettings


def _assert_in_range(player: Player) -> None:
    for value in player.stats().values():
        assert 0 <= value <= 100


def test_stats_stay_clamped_for_random_mutation_sequences() -> None:
    rng = DeterministicRNG.from_seed("clamp")
    player = Player()
    for _ in range(300):
        op = rng.next_int(0, 4)
        amount = rng.next_int(-250, 251)
        if op == 0:
            player.update_stats(
                health=amount,
                hunger=-amount,
                energy=rng.next_int(-250, 251),
                reputation=rng.next_int(-250, 251),
            )
        elif op == 1:
            player.feed(amount)
        elif op == 2:
            player.take_damage(amount)
        else:
            player.rest()
        _assert_in_range(player)


def test_lethal_damage_floors_health_at_zero() -> None:
    player = Player(health=100, hunger=50)

    player.take_damage(150)

    assert player.health == 0
    assert player.is_alive() is False
    assert player.hunger == 50


def test_rest_restores_full_energy() -> None:
    player = Player(energy=10)
    player.rest()
    assert player.energy == 100


def test_feed_floors_hunger_at_zero() -> None:
    player = Player(hunger=20)
    player.feed(35)
    assert player.hunger == 0


def test_apply_deltas_touches_every_stat() -> None:
    player = Player(health=50, hunger=50, energy=50, reputation=50)
    player.apply_deltas(StatDeltas(health=10, hunger=-20, energy=60, reputation=-70))
    assert player.stats() == {"health": 60, "hunger": 30, "energy": 100, "reputation": 0}


def test_recruit_uses_baseline_loyalty_and_allows_duplicates() -> None:
    player = Player(base_loyalty=40)

    first = player.recruit_member("Ash", "hunter")
    second = player.recruit_member("Ash", "scout")

    assert first.loyalty == 40
    assert len(player.followers) == 2
    assert [follower.role for follower in player.followers] == ["hunter", "scout"]
    assert player.followers_with_role("hunter") == [first]
    assert second.name == "Ash"


def test_player_state_roundtrip_keeps_collections() -> None:
    settings = EngineSettings(start_health=80, start_reputation=20)
    player = Player.from_settings(settings)
    player.recruit_member("Sable", "scout")
    player.update_stats(hunger=7)

    restored = Player.from_state(player.to_state(), settings)

    assert restored.stats() == player.stats()
    assert restored.stats()["health"] == 80
    assert [follower.name for follower in restored.followers] == ["Sable"]
    assert restored.inventory.capacity == settings.inventory_capacity
