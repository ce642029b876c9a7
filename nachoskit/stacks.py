"""Last-in, first-out stacks of integers with two storage strategies."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod

from nachoskit.intlist import IntList

_FIRST_VALUE = 17


class StackFullError(OverflowError):
    """Raised when pushing onto a stack that has no more room."""


class StackEmptyError(IndexError):
    """Raised when popping from a stack that holds nothing."""


class Stack(ABC):
    """An abstract stack of integers."""

    @abstractmethod
    def push(self, value: int) -> None:
        """Put an integer on top of the stack."""

    @abstractmethod
    def pop(self) -> int:
        """Remove and return the integer on top of the stack."""

    @abstractmethod
    def is_full(self) -> bool:
        """Return True if the stack has no more room."""

    @abstractmethod
    def is_empty(self) -> bool:
        """Return True if the stack holds nothing."""

    def self_test(self, num_to_push: int) -> list[str]:
        """Push ``num_to_push`` counting values from 17, then pop them all.

        Returns the log lines, one per push and pop, in order.
        """
        lines: list[str] = []
        for count in range(_FIRST_VALUE, _FIRST_VALUE + num_to_push):
            if self.is_full():
                raise StackFullError("stack filled up during self test")
            lines.append(f"pushing {count}")
            self.push(count)
        while not self.is_empty():
            lines.append(f"popping {self.pop()}")
        return lines


class ArrayStack(Stack):
    """A stack with a fixed maximum number of elements."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("stack size must be at least 1")
        self.size = size
        self._items: list[int] = []

    def push(self, value: int) -> None:
        if self.is_full():
            raise StackFullError("push onto a full stack")
        self._items.append(value)

    def pop(self) -> int:
        if self.is_empty():
            raise StackEmptyError("pop from an empty stack")
        return self._items.pop()

    def is_full(self) -> bool:
        return len(self._items) == self.size

    def is_empty(self) -> bool:
        return not self._items


class ListStack(Stack):
    """A stack kept on a linked list; it never fills up."""

    def __init__(self) -> None:
        self._items = IntList()

    def push(self, value: int) -> None:
        self._items.prepend(value)

    def pop(self) -> int:
        if self.is_empty():
            raise StackEmptyError("pop from an empty stack")
        return self._items.remove()

    def is_full(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return self._items.is_empty()


def main(argv: list[str] | None = None) -> int:
    """Run the self test on both stack kinds and print the log."""
    stacks: list[tuple[str, Stack]] = [
        ("ArrayStack", ArrayStack(10)),
        ("ListStack", ListStack()),
    ]
    for name, stack in stacks:
        print(f"Testing {name}")
        for line in stack.self_test(10):
            print(line)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())