from __future__ import annotations

from typing import Iterable, Literal, Sequence

from pydantic import Field

from .errors import AlreadyAtEndingError, DeadEndError, NodeNotFoundError, NotInitializedError, StoryGraphError
from .models import EndingOutcome, Follower, FrozenModel, GameEvent, Item, StatDeltas

Side = Literal["left", "right"]


class StoryNode(FrozenModel):
    id: int
    scenario_text: str = Field(min_length=1)
    choice_a_text: str = ""
    choice_b_text: str = ""
    left: int | None = None
    right: int | None = None
    is_ending: bool = False
    ending_description: str = ""
    ending_outcome: EndingOutcome = "victory"
    on_enter: StatDeltas = Field(default_factory=StatDeltas)
    grants_item: Item | None = None
    recruits: Follower | None = None
    scripted_event: GameEvent | None = None
    choice_a_requires: str | None = None
    choice_b_requires: str | None = None

    def child(self, side: Side) -> int | None:
        return self.left if side == "left" else self.right

    def requirement(self, side: Side) -> str | None:
        return self.choice_a_requires if side == "left" else self.choice_b_requires

    def children(self) -> list[int]:
        return [child for child in (self.left, self.right) if child is not None]


def validate_tree(nodes: Sequence[StoryNode], root_id: int | None = None) -> list[str]:
    """Return every structural problem found in ``nodes``; empty means well formed.

    The first node is the root unless ``root_id`` is given.
    """
    issues: list[str] = []
    if not nodes:
        return ["Story tree has no nodes."]

    by_id: dict[int, StoryNode] = {}
    for node in nodes:
        if node.id in by_id:
            issues.append(f"Duplicate story node id {node.id}.")
            continue
        by_id[node.id] = node

    root = nodes[0].id if root_id is None else root_id
    if root not in by_id:
        issues.append(f"Root node {root} is not defined.")
        return issues

    parents: dict[int, int] = {}
    for node in by_id.values():
        if node.is_ending and node.children():
            issues.append(f"Ending node {node.id} must not have choices.")
        if not node.is_ending and not node.children():
            issues.append(f"Node {node.id} is not an ending but has no choices.")
        if node.left is not None and node.left == node.right:
            issues.append(f"Node {node.id} uses child {node.left} for both choices.")
        for child in node.children():
            if child not in by_id:
                issues.append(f"Node {node.id} points at missing node {child}.")
                continue
            if child == root:
                issues.append(f"Node {node.id} points back at root {root}.")
                continue
            if child in parents and parents[child] != node.id:
                issues.append(f"Node {child} has more than one parent ({parents[child]}, {node.id}).")
                continue
            parents[child] = node.id

    reachable: set[int] = set()
    stack = [root]
    while stack:
        node_id = stack.pop()
        if node_id in reachable or node_id not in by_id:
            continue
        reachable.add(node_id)
        stack.extend(by_id[node_id].children())
    for node_id in by_id:
        if node_id not in reachable:
            issues.append(f"Node {node_id} is unreachable from root {root}.")
    return issues


class StoryGraph:
    """Binary decision tree stored as an id-addressed arena.

    ``current`` is the id of the node the player stands on, or ``None`` until
    the tree has been built.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, StoryNode] = {}
        self._root_id: int | None = None
        self._current_id: int | None = None

    @property
    def root_id(self) -> int | None:
        return self._root_id

    @property
    def current_id(self) -> int | None:
        return self._current_id

    def is_initialized(self) -> bool:
        return self._current_id is not None

    def build_tree(self, nodes: Iterable[StoryNode] | None = None) -> StoryNode:
        if nodes is None:
            from .story_content import default_story_nodes

            nodes = default_story_nodes()
        ordered = list(nodes)
        issues = validate_tree(ordered)
        if issues:
            raise StoryGraphError("Story tree is malformed.", issues)
        self._nodes = {node.id: node for node in ordered}
        self._root_id = ordered[0].id
        self._current_id = self._root_id
        return self._nodes[self._root_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def node_ids(self) -> list[int]:
        """Pre-order ids: node, then its left subtree, then its right subtree."""
        if self._root_id is None:
            return []
        order: list[int] = []
        stack = [self._root_id]
        while stack:
            node_id = stack.pop()
            order.append(node_id)
            node = self._nodes[node_id]
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)
        return order

    def find_node(self, node_id: int) -> StoryNode | None:
        for candidate in self.node_ids():
            if candidate == node_id:
                return self._nodes[candidate]
        return None

    def get_current_node(self) -> StoryNode:
        if self._current_id is None:
            raise NotInitializedError("Story graph has not been built.")
        return self._nodes[self._current_id]

    def set_current_node(self, node_id: int) -> StoryNode:
        node = self.find_node(node_id)
        if node is None:
            raise NodeNotFoundError(f"Story node {node_id} does not exist.")
        self._current_id = node.id
        return node

    def is_at_ending(self) -> bool:
        return self.get_current_node().is_ending

    def peek_child(self, side: Side) -> StoryNode:
        node = self.get_current_node()
        if node.is_ending:
            raise AlreadyAtEndingError(f"Node {node.id} is an ending; no further choices.")
        child_id = node.child(side)
        if child_id is None:
            raise DeadEndError(f"Node {node.id} has no {side} path.")
        return self._nodes[child_id]

    def move(self, side: Side) -> StoryNode:
        child = self.peek_child(side)
        self._current_id = child.id
        return child

    def move_to_left(self) -> StoryNode:
        return self.move("left")

    def move_to_right(self) -> StoryNode:
        return self.move("right")
