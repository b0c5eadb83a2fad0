"""
Splitting a paragraph's runs at a character offset.

A character offset into the paragraph text usually falls inside a run. The
run is duplicated so that both halves keep its w:rPr verbatim and each copy
holds its part of the text.
"""

from __future__ import annotations

from .models.paragraph import Paragraph
from .models.run import Run


def split_runs(paragraph: Paragraph, offset: int) -> tuple[list[Run], list[Run]]:
    """Partition the paragraph's runs around ``offset``.

    Runs wholly before the offset go to the first list and runs at or after
    it to the second, unchanged (they are the paragraph's own runs). A run
    straddling the offset is replaced by two detached copies; a copy whose
    text would be empty is dropped.

    Args:
        paragraph: The paragraph whose runs are split
        offset: Character offset into ``paragraph.text``; clamped to
            ``[0, len(text)]``

    Returns:
        Tuple of (before_runs, after_runs)

    Example:
        >>> before, after = split_runs(paragraph, 6)  # runs "Hello ", "world."
        >>> "".join(r.text for r in before), "".join(r.text for r in after)
        ('Hello ', 'world.')
    """
    runs = paragraph.runs
    total = sum(len(run.text) for run in runs)
    offset = max(0, min(offset, total))

    before: list[Run] = []
    after: list[Run] = []
    position = 0

    for run in runs:
        length = len(run.text)
        run_start = position
        run_end = position + length
        position = run_end

        if run_end <= offset:
            before.append(run)
        elif run_start >= offset:
            after.append(run)
        else:
            split_at = offset - run_start
            head = run.copy_slice(0, split_at)
            tail = run.copy_slice(split_at, length)
            if head is not None:
                before.append(head)
            if tail is not None:
                after.append(tail)

    return before, after


def insert_run_at(paragraph: Paragraph, offset: int, new_run: Run) -> None:
    """Splice ``new_run`` into the paragraph at ``offset``.

    Only the run straddling the offset is touched: it is replaced in place by
    its head, the new run and its tail. At a run boundary the new run goes
    right after the run ending there. Hyperlinks, bookmarks and other non-run
    children keep their position relative to every existing run.

    Args:
        paragraph: The paragraph to modify in place
        offset: Character offset into the paragraph text (clamped)
        new_run: Detached run to insert
    """
    runs = paragraph.runs
    if not runs:
        paragraph.replace_runs([new_run])
        return

    total = sum(len(run.text) for run in runs)
    offset = max(0, min(offset, total))

    preceding: Run | None = None
    position = 0
    for run in runs:
        length = len(run.text)
        run_start = position
        position += length

        if position <= offset:
            preceding = run
            continue
        if run_start < offset:
            split_at = offset - run_start
            pieces = [run.copy_slice(0, split_at), new_run, run.copy_slice(split_at, length)]
            element = run.element
            for piece in reversed(pieces):
                if piece is not None:
                    element.addnext(piece.element)
            element.getparent().remove(element)
            return
        break

    if preceding is not None:
        preceding.element.addnext(new_run.element)
    else:
        runs[0].element.addprevious(new_run.element)
