from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Generic, Protocol, Sequence, TypeVar

T = TypeVar("T")

_ZERO_SEED_FALLBACK = 0x9E3779B9
_ZERO_STATE_FALLBACK = 0x6D2B79F5


def seed_to_uint32(seed: int | str) -> int:
    digest = hashlib.sha256(str(seed).encode("utf-8")).hexdigest()
    value = int(digest[:8], 16)
    return value or _ZERO_SEED_FALLBACK


@dataclass(slots=True)
class WeightedEntry(Generic[T]):
    value: T
    weight: float


class RandomSource(Protocol):
    def next_float(self) -> float: ...

    def next_int(self, min_inclusive: int, max_exclusive: int) -> int: ...


@dataclass(slots=True)
class DeterministicRNG:
    """xorshift32 generator whose whole state fits in a save file."""

    seed: int | str
    state: int
    calls: int = 0

    @classmethod
    def from_seed(cls, seed: int | str) -> "DeterministicRNG":
        return cls(seed=seed, state=seed_to_uint32(seed))

    def _advance(self) -> int:
        value = self.state & 0xFFFFFFFF
        value ^= (value << 13) & 0xFFFFFFFF
        value ^= value >> 17
        value ^= (value << 5) & 0xFFFFFFFF
        self.state = value or _ZERO_STATE_FALLBACK
        self.calls += 1
        return self.state

    def next_float(self) -> float:
        return self._advance() / 2**32

    def next_int(self, min_inclusive: int, max_exclusive: int) -> int:
        if max_exclusive <= min_inclusive:
            raise ValueError(
                f"next_int requires max_exclusive ({max_exclusive}) > min_inclusive ({min_inclusive})."
            )
        return min_inclusive + int(self.next_float() * (max_exclusive - min_inclusive))

    def chance(self, probability: float) -> bool:
        if probability <= 0:
            return False
        return self.next_float() < probability


def pick_weighted(rng: RandomSource, entries: Sequence[WeightedEntry[T]]) -> T:
    valid = [entry for entry in entries if entry.weight > 0]
    if not valid:
        raise ValueError("pick_weighted requires at least one positive weight.")
    cursor = rng.next_float() * sum(entry.weight for entry in valid)
    for entry in valid:
        if cursor < entry.weight:
            return entry.value
        cursor -= entry.weight
    return valid[-1].value
