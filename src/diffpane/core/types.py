from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple


class DiffLineKind(str, Enum):
    HEADER = "header"
    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"

    @property
    def gutter(self) -> str:
        return _GUTTER[self]


_GUTTER = {
    DiffLineKind.HEADER: "@",
    DiffLineKind.ADDITION: "+",
    DiffLineKind.DELETION: "-",
    DiffLineKind.CONTEXT: " ",
}


class DisplayMode(str, Enum):
    INLINE = "inline"
    SIDE_BY_SIDE = "side_by_side"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["DisplayMode"] = None) -> "DisplayMode":
        """
        Lenient parse for user/config input. Raises ValueError for unknown values
        unless a default is given.
        """
        v = str(value if value is not None else "").strip().lower().replace("-", "_")
        if v in {"split", "sidebyside", "side_by_side", "sbs"}:
            return cls.SIDE_BY_SIDE
        if v in {"inline", "unified"}:
            return cls.INLINE
        if default is not None:
            return default
        raise ValueError(f"Unknown display mode: {value!r} (expected inline|side_by_side)")


@dataclass(frozen=True)
class DiffLine:
    id: int
    text: str
    kind: DiffLineKind
    old_line_number: Optional[int] = None
    new_line_number: Optional[int] = None

    @classmethod
    def blank(cls, line_id: int) -> "DiffLine":
        # Placeholder row used to pad the shorter side of a change block.
        return cls(id=line_id, text="", kind=DiffLineKind.CONTEXT)

    @property
    def is_blank(self) -> bool:
        return self.id < 0

    @property
    def gutter(self) -> str:
        return self.kind.gutter

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "kind": self.kind.value,
            "old_line_number": self.old_line_number,
            "new_line_number": self.new_line_number,
        }


@dataclass(frozen=True)
class DiffStats:
    additions: int = 0
    deletions: int = 0
    hunks: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"additions": self.additions, "deletions": self.deletions, "hunks": self.hunks}


@dataclass(frozen=True)
class FileDiff:
    path: str  # display path; may be "" when the diff carries no file header
    text: str


@dataclass(frozen=True)
class SideBySide:
    left: Tuple[DiffLine, ...] = ()
    right: Tuple[DiffLine, ...] = ()

    def rows(self) -> Iterator[Tuple[DiffLine, DiffLine]]:
        return zip(self.left, self.right)

    def __len__(self) -> int:
        return len(self.left)


@dataclass(frozen=True)
class ParsedDiff:
    file_name: str
    lines: Tuple[DiffLine, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)

    def side_by_side(self) -> SideBySide:
        from diffpane.core.side_by_side import reconcile

        return reconcile(self.lines)

    def to_dict(self, mode: DisplayMode = DisplayMode.INLINE) -> Dict[str, Any]:
        out: Dict[str, Any] = {"file_name": self.file_name, "stats": self.stats.to_dict()}
        if mode == DisplayMode.SIDE_BY_SIDE:
            pair = self.side_by_side()
            out["left"] = [ln.to_dict() for ln in pair.left]
            out["right"] = [ln.to_dict() for ln in pair.right]
        else:
            out["lines"] = [ln.to_dict() for ln in self.lines]
        return out
