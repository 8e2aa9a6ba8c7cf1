from __future__ import annotations


class GameError(Exception):
    """Base class for every recoverable error raised by the core."""


class IllegalMoveError(GameError):
    """The request is not legal in the current state; nothing was changed."""


class DetailedError(GameError):
    def __init__(self, message: str, details: list[str] | None = None) -> None:
        self.details = details or []
        suffix = "\n".join(self.details)
        super().__init__(f"{message}\n{suffix}" if suffix else message)


class CapacityExceededError(GameError):
    pass


class ItemNotFoundError(GameError, LookupError):
    pass


class ItemNotConsumableError(GameError):
    pass


class DeadEndError(IllegalMoveError):
    pass


class AlreadyAtEndingError(IllegalMoveError):
    pass


class QueueEmptyError(IllegalMoveError):
    pass


class NoHistoryError(IllegalMoveError):
    pass


class ChoiceLockedError(IllegalMoveError):
    pass


class SessionOverError(IllegalMoveError):
    pass


class NodeNotFoundError(GameError, LookupError):
    pass


class UnknownActionError(GameError, ValueError):
    pass


class NotInitializedError(GameError, RuntimeError):
    """Raised when the collaborator calls into the core out of sequence."""


class StoryGraphError(DetailedError, ValueError):
    pass


class CorruptSaveError(DetailedError, ValueError):
    pass
