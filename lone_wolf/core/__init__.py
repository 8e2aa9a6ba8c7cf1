"""Core turn-based survival state: story tree, events, inventory, undo and saves."""

from .engine import GameEngine
from .errors import (
    AlreadyAtEndingError,
    CapacityExceededError,
    ChoiceLockedError,
    CorruptSaveError,
    DeadEndError,
    GameError,
    IllegalMoveError,
    ItemNotConsumableError,
    ItemNotFoundError,
    NodeNotFoundError,
    NoHistoryError,
    NotInitializedError,
    QueueEmptyError,
    SessionOverError,
    StoryGraphError,
    UnknownActionError,
)
from .events import EventManager
from .inventory import Inventory
from .models import Follower, GameEvent, GameSnapshot, Item, SessionSave, StatDeltas
from .player import Player
from .save_system import SlotStorage, migrate_save
from .settings import EngineSettings, load_settings
from .story import StoryGraph, StoryNode, validate_tree

__all__ = [
    "AlreadyAtEndingError",
    "CapacityExceededError",
    "ChoiceLockedError",
    "CorruptSaveError",
    "DeadEndError",
    "EngineSettings",
    "EventManager",
    "Follower",
    "GameEngine",
    "GameError",
    "GameEvent",
    "GameSnapshot",
    "IllegalMoveError",
    "Inventory",
    "Item",
    "ItemNotConsumableError",
    "ItemNotFoundError",
    "NoHistoryError",
    "NodeNotFoundError",
    "NotInitializedError",
    "Player",
    "QueueEmptyError",
    "SessionOverError",
    "SessionSave",
    "SlotStorage",
    "StatDeltas",
    "StoryGraph",
    "StoryGraphError",
    "StoryNode",
    "UnknownActionError",
    "load_settings",
    "migrate_save",
    "validate_tree",
]
