from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from diffpane.core.types import DiffLine, DiffLineKind, DiffStats, FileDiff

# Metadata lines that carry nothing displayable.
_METADATA_PREFIXES = ("diff ", "index ", "---", "+++")

_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_GIT_HEADER_RE = re.compile(r"^diff --git a/(.+) b/(.+)$")

FILE_NAME_SCAN_LINES = 5


def _split_lines(text: str) -> List[str]:
    if not text:
        return []
    lines = text.split("\n")
    # "a\nb\n" is two lines, not three
    if lines[-1] == "":
        lines.pop()
    return lines


def _to_int(token: str) -> int:
    if not _INT_RE.match(token):
        return 0
    try:
        return int(token)
    except ValueError:
        # longer than the interpreter's int string conversion limit
        return 0


def parse_hunk_range(header: str) -> Optional[Tuple[int, int]]:
    """
    Seed values (old_start, new_start) from a hunk header like "@@ -10,2 +20,5 @@ def f():".

    Each range token loses its first character (the "-"/"+" sign) and is cut at the first ",";
    anything that isn't an integer becomes 0. Returns None when fewer than two tokens follow "@@".
    """
    parts = [p for p in header.split(" ") if p]
    if len(parts) < 3:
        return None
    old_part = parts[1][1:].split(",", 1)[0]
    new_part = parts[2][1:].split(",", 1)[0]
    return _to_int(old_part), _to_int(new_part)


def parse_diff(text: str) -> List[DiffLine]:
    """
    Classify unified-diff text line by line.

    Never raises: unknown lines fall back to unnumbered context, bad hunk headers seed the
    counters with 0. Ids advance once per input line (dropped metadata lines included), so
    they are increasing but not necessarily contiguous.
    """
    lines: List[DiffLine] = []
    old_line = 0
    new_line = 0

    for line_id, raw in enumerate(_split_lines(text)):
        if raw.startswith("@@"):
            seeds = parse_hunk_range(raw)
            if seeds is not None:
                old_line, new_line = seeds
            lines.append(DiffLine(id=line_id, text=raw, kind=DiffLineKind.HEADER))
        elif raw.startswith("+") and not raw.startswith("+++"):
            lines.append(DiffLine(id=line_id, text=raw[1:], kind=DiffLineKind.ADDITION, new_line_number=new_line))
            new_line += 1
        elif raw.startswith("-") and not raw.startswith("---"):
            lines.append(DiffLine(id=line_id, text=raw[1:], kind=DiffLineKind.DELETION, old_line_number=old_line))
            old_line += 1
        elif raw.startswith(" "):
            lines.append(
                DiffLine(
                    id=line_id,
                    text=raw[1:],
                    kind=DiffLineKind.CONTEXT,
                    old_line_number=old_line,
                    new_line_number=new_line,
                )
            )
            old_line += 1
            new_line += 1
        elif not raw.startswith(_METADATA_PREFIXES):
            # "\ No newline at end of file", "Binary files ... differ", plain text
            lines.append(DiffLine(id=line_id, text=raw, kind=DiffLineKind.CONTEXT))

    return lines


def extract_file_name(text: str) -> str:
    """Best-effort display name from a "+++" line within the first few lines of the diff."""
    for raw in (text or "").split("\n")[:FILE_NAME_SCAN_LINES]:
        if raw.startswith("+++ b/"):
            return raw[6:]
        if raw.startswith("+++ "):
            return raw[4:]
    return ""


def diff_stats(lines: Iterable[DiffLine]) -> DiffStats:
    additions = deletions = hunks = 0
    for ln in lines:
        if ln.kind == DiffLineKind.ADDITION:
            additions += 1
        elif ln.kind == DiffLineKind.DELETION:
            deletions += 1
        elif ln.kind == DiffLineKind.HEADER:
            hunks += 1
    return DiffStats(additions=additions, deletions=deletions, hunks=hunks)


def split_file_diffs(text: str) -> List[FileDiff]:
    """
    Split a multi-file diff (git diff / git show output) into one chunk per "diff --git" section.

    Text before the first section (e.g. a commit message) becomes its own chunk with an empty path.
    Input without any "diff --git" line is returned as a single chunk.
    """
    chunks: List[List[str]] = []
    current: List[str] = []
    for raw in _split_lines(text):
        if raw.startswith("diff --git ") and current:
            chunks.append(current)
            current = []
        current.append(raw)
    if current:
        chunks.append(current)

    out: List[FileDiff] = []
    for chunk in chunks:
        body = "\n".join(chunk)
        path = extract_file_name(body)
        if not path or path == "/dev/null":
            # deleted files only have "+++ /dev/null"; the git header still names them
            m = _GIT_HEADER_RE.match(chunk[0])
            path = m.group(2) if m else ""
        out.append(FileDiff(path=path, text=body))
    return out
