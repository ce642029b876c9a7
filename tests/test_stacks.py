import pytest

from nachoskit.stacks import (
    ArrayStack,
    ListStack,
    Stack,
    StackEmptyError,
    StackFullError,
    main,
)


def test_stack_is_abstract():
    with pytest.raises(TypeError):
        Stack()


def test_array_stack_rejects_bad_size():
    with pytest.raises(ValueError):
        ArrayStack(0)


@pytest.mark.parametrize("factory", [lambda: ArrayStack(5), ListStack])
def test_push_pop_is_lifo(factory):
    stack = factory()
    for value in (1, 2, 3):
        stack.push(value)
    assert [stack.pop(), stack.pop(), stack.pop()] == [3, 2, 1]
    assert stack.is_empty()


@pytest.mark.parametrize("factory", [lambda: ArrayStack(3), ListStack])
def test_pop_empty_raises(factory):
    stack = factory()
    with pytest.raises(StackEmptyError):
        stack.pop()


def test_array_stack_fills_up():
    stack = ArrayStack(2)
    stack.push(1)
    assert not stack.is_full()
    stack.push(2)
    assert stack.is_full()
    with pytest.raises(StackFullError):
        stack.push(3)
    assert stack.pop() == 2


def test_list_stack_never_full():
    stack = ListStack()
    for value in range(1000):
        stack.push(value)
    assert stack.is_full() is False
    assert stack.pop() == 999


@pytest.mark.parametrize("factory", [lambda: ArrayStack(10), ListStack])
def test_self_test_log(factory):
    lines = factory().self_test(10)
    assert lines[0] == "pushing 17"
    assert len(lines) == 20
    pushed = [line.split()[1] for line in lines[:10]]
    popped = [line.split()[1] for line in lines[10:]]
    assert all(line.startswith("pushing ") for line in lines[:10])
    assert all(line.startswith("popping ") for line in lines[10:])
    assert popped == list(reversed(pushed))


def test_self_test_empties_stack():
    stack = ArrayStack(4)
    stack.self_test(4)
    assert stack.is_empty()


def test_self_test_overflow_raises():
    stack = ArrayStack(3)
    with pytest.raises(StackFullError):
        stack.self_test(4)


def test_main_output(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Testing ArrayStack"
    assert out[1] == "pushing 17"
    assert out[21] == "Testing ListStack"
    assert out[1:21] == out[22:42]
    assert len(out) == 42