"""Inline mark resolution for text nodes."""

from collections.abc import Callable, Iterable
from functools import reduce

from jtix.document import Mark, MarkType
from jtix.styles import Styler

_MARK_TRANSFORMS: dict[MarkType, Callable[[Styler, str], str]] = {
    MarkType.STRONG: lambda s, text: s.bold(text),
    MarkType.EMPHASIS: lambda s, text: s.italic(text),
    MarkType.CODE: lambda s, text: s.inline_code(text),
    MarkType.LINK: lambda s, text: s.link(text),
    MarkType.STRIKE: lambda s, text: s.strike(text),
    MarkType.UNDERLINE: lambda s, text: s.underline(text),
    MarkType.TEXT_COLOR: lambda s, text: s.highlight(text),
}


def apply_mark(text: str, mark: Mark, styler: Styler) -> str:
    """Apply a single mark to already-styled text. Unknown marks are a no-op."""
    transform = _MARK_TRANSFORMS.get(mark.type)
    if transform is None:
        return text
    return transform(styler, text)


def apply_marks_in_order(text: str, marks: Iterable[Mark], styler: Styler) -> str:
    """Apply marks as a left fold over their document order.

    Each mark wraps the result of the marks before it, so ``[strong, em]``
    yields ``italic(bold(text))``. Marks are not a set: repeating one wraps
    twice.

    Args:
        text: Text to style, already passed through ``styler.text``
        marks: Marks in document order
        styler: Styling capability to draw with

    Returns:
        The styled text
    """
    return reduce(lambda styled, mark: apply_mark(styled, mark, styler), marks, text)
