"""Bordered grid layout for document tables."""

from collections.abc import Sequence

from jtix.styles import PLAIN, Styler

MAX_COLUMN_WIDTH = 30
# Width for cells in columns the header row does not have, or whose cells
# are all empty.
EXTRA_COLUMN_WIDTH = 10


def _width_for(widths: Sequence[int], index: int) -> int:
    if index < len(widths) and widths[index]:
        return widths[index]
    return EXTRA_COLUMN_WIDTH


def column_widths(rows: Sequence[Sequence[str]]) -> list[int]:
    """Compute column widths from the header row's columns.

    Column ``i`` is as wide as its longest cell, capped at MAX_COLUMN_WIDTH.
    Rows shorter than the header count as empty in the missing columns.
    """
    if not rows:
        return []
    return [
        min(
            MAX_COLUMN_WIDTH,
            max(len(row[i]) if i < len(row) else 0 for row in rows),
        )
        for i in range(len(rows[0]))
    ]


def layout_table(
    rows: Sequence[Sequence[str]],
    *,
    styler: Styler = PLAIN,
    prefix: str = "",
) -> str:
    """Lay out rows of plain-text cells as a bordered grid.

    The first row is the header: it is drawn bold and followed by a separator
    line as long as the header line. Cells are right-padded to their column
    width but never truncated, so a cell longer than MAX_COLUMN_WIDTH pushes
    the rest of its row out of alignment.

    Args:
        rows: Cell text per row, header first
        styler: Styling capability for the header and separator
        prefix: Indentation placed before every line

    Returns:
        The grid, one line per row plus the separator, or "" with no rows
    """
    if not rows:
        return ""

    widths = column_widths(rows)
    lines: list[str] = []
    for row_index, row in enumerate(rows):
        cells = [cell.ljust(_width_for(widths, i)) for i, cell in enumerate(row)]
        line = f"{prefix}│ {' │ '.join(cells)} │"
        if row_index == 0:
            separator = f"{prefix}├{'─' * (len(line) - len(prefix) - 2)}┤"
            lines.append(styler.bold(styler.text(line)))
            lines.append(styler.dim(styler.text(separator)))
        else:
            lines.append(styler.text(line))
    return "\n".join(lines)
