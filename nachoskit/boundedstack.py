"""A fixed-capacity last-in, first-out stack of arbitrary values."""

from __future__ import annotations

import sys
from typing import Generic, TypeVar

from nachoskit.stacks import StackEmptyError, StackFullError

T = TypeVar("T")


def _successor(value):
    """Return the value that follows ``value``: the next character or number."""
    if isinstance(value, str) and len(value) == 1:
        return chr(ord(value) + 1)
    return value + 1


class BoundedStack(Generic[T]):
    """A stack that holds at most ``size`` values of any one kind."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("stack size must be at least 1")
        self.size = size
        self._items: list[T] = []

    def push(self, value: T) -> None:
        """Put ``value`` on top of the stack; raise StackFullError if full."""
        if self.is_full():
            raise StackFullError("push onto a full stack")
        self._items.append(value)

    def pop(self) -> T:
        """Remove and return the top value; raise StackEmptyError if empty."""
        if self.is_empty():
            raise StackEmptyError("pop from an empty stack")
        return self._items.pop()

    def is_full(self) -> bool:
        """Return True if the stack has no more room."""
        return len(self._items) == self.size

    def is_empty(self) -> bool:
        """Return True if the stack holds nothing."""
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def self_test(self, start: T) -> list[str]:
        """Fill the stack with successive values from ``start``, then empty it.

        Returns the log lines, one per push and pop, in order.
        """
        lines: list[str] = []
        count = start
        while not self.is_full():
            lines.append(f"pushing {count}")
            self.push(count)
            count = _successor(count)
        while not self.is_empty():
            lines.append(f"popping {self.pop()}")
        return lines


def main(argv: list[str] | None = None) -> int:
    """Run the self test on an integer stack and a character stack."""
    runs: list[tuple[str, BoundedStack, object]] = [
        ("int", BoundedStack[int](10), 17),
        ("char", BoundedStack[str](10), "a"),
    ]
    for kind, stack, start in runs:
        print(f"Testing Stack<{kind}>")
        for line in stack.self_test(start):
            print(line)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())