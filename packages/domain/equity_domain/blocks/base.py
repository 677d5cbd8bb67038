"""Base classes for computation blocks.

A block reads named inputs from a BlockContext, computes, and writes named
outputs back. The executor orders blocks so that every input produced by
another block is available before the consumer runs.

- Block: abstract computation unit
- BlockContext: named values shared between blocks
- BlockExecutor: dependency-ordered execution with input/output checks
- topological_sort: Kahn's algorithm over producer -> consumer edges
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional

from ..log import get_logger

logger = get_logger(__name__)


# =============================================================================
# Block Context
# =============================================================================

@dataclass
class BlockContext:
    """Named values passed between blocks.

    Example:
        context = BlockContext()
        context.set("roster", roster)
        context.set("as_of_date", date.today())

        ProjectionBlock().execute(context)
        vesting_df = context.get("vesting_by_contributor")
    """

    _data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        """Get a value.

        Raises:
            KeyError: If key is not in the context
        """
        if key not in self._data:
            raise KeyError(f"Key '{key}' not found in context. Available keys: {sorted(self._data)}")
        return self._data[key]

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data)


# =============================================================================
# Block Base Class
# =============================================================================

class Block(ABC):
    """Abstract computation unit with declared inputs and outputs.

    Subclass example:
        class TotalSlicesBlock(Block):
            def inputs(self) -> List[str]:
                return ["roster"]

            def outputs(self) -> List[str]:
                return ["total_slices"]

            def execute(self, context: BlockContext) -> None:
                roster = context.get("roster")
                context.set("total_slices", sum(c.slices for c in roster))
    """

    @abstractmethod
    def inputs(self) -> List[str]:
        """Context keys this block reads."""

    @abstractmethod
    def outputs(self) -> List[str]:
        """Context keys this block writes."""

    @abstractmethod
    def execute(self, context: BlockContext) -> None:
        """Read inputs from context, compute, write outputs to context."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(inputs={self.inputs()}, outputs={self.outputs()})"


# =============================================================================
# Dependency Resolution
# =============================================================================

class CircularDependencyError(Exception):
    """Raised when blocks depend on each other in a cycle."""
    pass


def topological_sort(blocks: List[Block]) -> List[Block]:
    """Order blocks so producers run before their consumers.

    Inputs not produced by any block are expected in the initial context.
    Blocks with no ordering constraint keep their relative input order.

    Raises:
        ValueError: If two blocks declare the same output
        CircularDependencyError: If the dependency graph has a cycle
    """
    producers: Dict[str, int] = {}
    for index, block in enumerate(blocks):
        for key in block.outputs():
            if key in producers:
                raise ValueError(
                    f"Multiple blocks produce '{key}': {blocks[producers[key]]} and {block}"
                )
            producers[key] = index

    pending = [0] * len(blocks)
    consumers: List[List[int]] = [[] for _ in blocks]
    for index, block in enumerate(blocks):
        for key in block.inputs():
            producer = producers.get(key)
            if producer is not None:
                consumers[producer].append(index)
                pending[index] += 1

    ready: Deque[int] = deque(i for i, count in enumerate(pending) if count == 0)
    order: List[int] = []
    while ready:
        current = ready.popleft()
        order.append(current)
        for consumer in consumers[current]:
            pending[consumer] -= 1
            if pending[consumer] == 0:
                ready.append(consumer)

    if len(order) != len(blocks):
        stuck = [blocks[i] for i, count in enumerate(pending) if count > 0]
        raise CircularDependencyError(f"Circular dependency detected among blocks: {stuck}")

    return [blocks[i] for i in order]


# =============================================================================
# Block Executor
# =============================================================================

class BlockExecutor:
    """Runs blocks in dependency order.

    Example:
        executor = BlockExecutor([EquityValuesBlock(), ProjectionBlock()])
        context = BlockContext()
        context.set("roster", roster)
        context.set("as_of_date", date(2026, 1, 1))
        context.set("valuation_config", config)
        executor.execute(context)

        rows_df = context.get("equity_values")
    """

    def __init__(self, blocks: List[Block]):
        self.blocks = blocks
        self._order: Optional[List[Block]] = None

    @property
    def order(self) -> List[Block]:
        if self._order is None:
            self._order = topological_sort(self.blocks)
        return self._order

    def execute(self, context: BlockContext) -> BlockContext:
        """Execute all blocks against context and return it.

        Raises:
            CircularDependencyError: If blocks have circular dependencies
            KeyError: If a required input is missing from context
            ValueError: If a block did not write a declared output
        """
        for block in self.order:
            missing = [key for key in block.inputs() if not context.has(key)]
            if missing:
                raise KeyError(
                    f"Block {block} requires input '{missing[0]}' but it's not in context. "
                    f"Available keys: {context.keys()}"
                )

            block.execute(context)

            unwritten = [key for key in block.outputs() if not context.has(key)]
            if unwritten:
                raise ValueError(
                    f"Block {block} declared output '{unwritten[0]}' but didn't write it to context"
                )

            logger.debug("block.executed", block=type(block).__name__)

        return context
