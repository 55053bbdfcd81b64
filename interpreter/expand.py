# keywords: [work list, repeat expansion, lazy effects, block count]
"""Expand canonical programs into atomic effects without native recursion."""

from typing import Iterator, Set

from interfaces import Effect, Move, Program, Repeat, Turn, STEP, TURN, SKIP


def iter_effects(program: Program) -> Iterator[Effect]:
    """Yield the atomic effects of ``program`` depth-first, left to right.

    Repeats are expanded lazily from an explicit frame stack, so a huge
    ``count`` costs no memory up front and the consumer can stop at any effect.
    """
    inert = _inert_repeats(program)
    # Frame: [commands, next index, iterations left]
    stack = [[program, 0, 1]]
    while stack:
        frame = stack[-1]
        commands, index, remaining = frame
        if index >= len(commands):
            if remaining > 1:
                frame[1] = 0
                frame[2] = remaining - 1
            else:
                stack.pop()
            continue

        command = commands[index]
        frame[1] = index + 1

        if isinstance(command, Repeat):
            if id(command) not in inert:
                stack.append([command.body, 0, command.count])
        elif isinstance(command, Move):
            for _ in range(command.distance):
                yield Effect(STEP, command)
        elif isinstance(command, Turn):
            yield Effect(TURN, command)
        else:
            yield Effect(SKIP, command)


def _inert_repeats(program: Program) -> Set[int]:
    """Ids of repeats that yield no effect at all, found bottom-up in one pass.

    Expanding such a repeat would spin through its iterations without ever
    handing an effect to the consumer.
    """
    inert: Set[int] = set()
    stack = [(command, False) for command in program if isinstance(command, Repeat)]
    while stack:
        command, expanded = stack.pop()
        if not expanded:
            stack.append((command, True))
            stack.extend((child, False) for child in command.body if isinstance(child, Repeat))
        elif command.count == 0 or all(
            isinstance(child, Repeat) and id(child) in inert for child in command.body
        ):
            inert.add(id(command))
    return inert


def count_effects(program: Program) -> int:
    """Number of state changes a program produces when no move is illegal."""
    # Frame: [remaining commands, subtotal, multiplier]
    stack = [[iter(program), 0, 1]]
    while True:
        frame = stack[-1]
        for command in frame[0]:
            if isinstance(command, Move):
                frame[1] += command.distance
            elif isinstance(command, Turn):
                frame[1] += 1
            elif isinstance(command, Repeat):
                stack.append([iter(command.body), 0, command.count])
                break
        else:
            stack.pop()
            subtotal = frame[1] * frame[2]
            if not stack:
                return subtotal
            stack[-1][1] += subtotal


def count_blocks(program: Program) -> int:
    """Number of editor blocks in a program; repeat bodies count too."""
    total = 0
    pending = list(program)
    while pending:
        command = pending.pop()
        total += 1
        if isinstance(command, Repeat):
            pending.extend(command.body)
    return total
