from diffpane.core.diff_parser import parse_diff
from diffpane.core.side_by_side import reconcile
from diffpane.core.types import DiffLineKind


def _texts(column):
    return [None if ln.is_blank else ln.text for ln in column]


def test_simple_replace_pairs_on_same_row():
    pair = reconcile(parse_diff("@@ -1,1 +1,1 @@\n-old\n+new"))
    assert _texts(pair.left) == ["@@ -1,1 +1,1 @@", "old"]
    assert _texts(pair.right) == ["@@ -1,1 +1,1 @@", "new"]


def test_more_deletions_than_additions_pads_right():
    pair = reconcile(parse_diff("-a\n-b\n+c"))
    assert _texts(pair.left) == ["a", "b"]
    assert _texts(pair.right) == ["c", None]
    blank = pair.right[1]
    assert blank.kind == DiffLineKind.CONTEXT
    assert blank.text == ""
    assert blank.old_line_number is None and blank.new_line_number is None


def test_more_additions_than_deletions_pads_left():
    pair = reconcile(parse_diff("@@ -1 +1 @@\n-a\n+b\n+c\n+d\n x"))
    assert _texts(pair.left) == ["@@ -1 +1 @@", "a", None, None, "x"]
    assert _texts(pair.right) == ["@@ -1 +1 @@", "b", "c", "d", "x"]


def test_deletion_after_additions_starts_new_block():
    pair = reconcile(parse_diff("+a\n-b\n+c"))
    assert _texts(pair.left) == [None, "b"]
    assert _texts(pair.right) == ["a", "c"]


def test_context_and_headers_mirror_on_both_sides():
    lines = parse_diff("@@ -1,2 +1,2 @@\n foo\n bar")
    pair = reconcile(lines)
    assert list(pair.left) == lines
    assert list(pair.right) == lines


def test_trailing_block_is_flushed():
    pair = reconcile(parse_diff("@@ -1 +1 @@\n keep\n-x\n-y"))
    assert _texts(pair.left) == ["@@ -1 +1 @@", "keep", "x", "y"]
    assert _texts(pair.right) == ["@@ -1 +1 @@", "keep", None, None]


def test_columns_equal_length_and_never_both_blank():
    text = "\n".join(
        [
            "@@ -1,6 +1,5 @@",
            " a",
            "-b",
            "-c",
            "-d",
            "+B",
            " e",
            "+f",
            "+g",
            "-h",
            "\\ No newline at end of file",
        ]
    )
    pair = reconcile(parse_diff(text))
    assert len(pair.left) == len(pair.right) == len(pair)
    for left, right in pair.rows():
        assert not (left.is_blank and right.is_blank)


def test_original_order_preserved_per_column():
    lines = parse_diff("@@ -1,3 +1,3 @@\n-a\n-b\n+c\n x\n+d\n-e")
    pair = reconcile(lines)
    left_real = [ln for ln in pair.left if not ln.is_blank]
    right_real = [ln for ln in pair.right if not ln.is_blank]
    assert left_real == [ln for ln in lines if ln.kind != DiffLineKind.ADDITION]
    assert right_real == [ln for ln in lines if ln.kind != DiffLineKind.DELETION]


def test_blank_ids_are_negative_and_unique():
    pair = reconcile(parse_diff("-a\n-b\n-c\n+d\n x\n+e\n+f"))
    blank_ids = [ln.id for ln in pair.left + pair.right if ln.is_blank]
    assert len(blank_ids) == 4
    assert all(i < 0 for i in blank_ids)
    assert sorted(blank_ids) == [-4, -3, -2, -1]


def test_reconcile_is_repeatable():
    lines = parse_diff("@@ -1,2 +1,1 @@\n-a\n-b\n+c")
    assert reconcile(lines) == reconcile(lines)
    assert reconcile(parse_diff("-a\n+b")) == reconcile(parse_diff("-a\n+b"))


def test_empty():
    pair = reconcile([])
    assert pair.left == () and pair.right == ()
