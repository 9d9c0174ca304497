from __future__ import annotations

from typing import Iterable, List

from diffpane.core.types import DiffLine, DiffLineKind, SideBySide


def reconcile(lines: Iterable[DiffLine]) -> SideBySide:
    """
    Pair parsed diff lines into two equal-length columns (old on the left, new on the right).

    Deletions and additions of one change block are aligned row by row in order of appearance;
    the shorter side is padded with blank lines. Blank lines get ids -1, -2, ... so they never
    collide with parsed ids, which are >= 0.
    """
    left: List[DiffLine] = []
    right: List[DiffLine] = []
    deletions: List[DiffLine] = []
    additions: List[DiffLine] = []
    next_blank_id = -1

    def blank() -> DiffLine:
        nonlocal next_blank_id
        line = DiffLine.blank(next_blank_id)
        next_blank_id -= 1
        return line

    def flush() -> None:
        for i in range(max(len(deletions), len(additions))):
            left.append(deletions[i] if i < len(deletions) else blank())
            right.append(additions[i] if i < len(additions) else blank())
        deletions.clear()
        additions.clear()

    for line in lines:
        if line.kind == DiffLineKind.DELETION:
            # a deletion after buffered additions starts a new change block
            if additions:
                flush()
            deletions.append(line)
        elif line.kind == DiffLineKind.ADDITION:
            additions.append(line)
        else:
            flush()
            left.append(line)
            right.append(line)
    flush()

    return SideBySide(left=tuple(left), right=tuple(right))
