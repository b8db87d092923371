"""Styling capabilities injected into the document renderer.

The renderer never styles text itself: it asks a Styler. ``PlainStyler``
returns text untouched, which is what table cells, JSON output and tests use.
``MarkupStyler`` produces rich console markup, which a ``rich.console.Console``
turns into terminal escape sequences (or strips, for ``--color never``).

Callers must pass every raw string through ``text()`` before wrapping it, so
that the output medium's own syntax (rich's ``[tags]``) cannot leak in.
"""

import re
from typing import Protocol

# An empty pair of tags. Backslashes written before it are consumed as
# literal backslashes and can never escape a tag that follows.
_TAG_BREAK = "[dim][/dim]"
_MARKUP_SPECIAL = re.compile(r"\\+|\[")


def _escape_special(match: re.Match[str]) -> str:
    found = match.group()
    if found == "[":
        return "\\["
    return found * 2 + _TAG_BREAK


def escape_markup(text: str) -> str:
    """Escape text for rich markup so it stays literal when joined with other markup.

    ``rich.markup.escape`` only escapes complete tags, so fragments such as
    ``"[/bold"`` and ``"] here"`` pass through unchanged and form a tag once
    concatenated. Here every ``[`` is escaped, and every run of backslashes
    is doubled and closed off so it cannot escape whatever comes next.
    """
    return _MARKUP_SPECIAL.sub(_escape_special, text)


class Styler(Protocol):
    """Text transforms available to the renderer."""

    def text(self, text: str) -> str: ...

    def bold(self, text: str) -> str: ...

    def italic(self, text: str) -> str: ...

    def underline(self, text: str) -> str: ...

    def strike(self, text: str) -> str: ...

    def inline_code(self, text: str) -> str: ...

    def link(self, text: str) -> str: ...

    def highlight(self, text: str) -> str: ...

    def dim(self, text: str) -> str: ...

    def accent(self, text: str) -> str: ...

    def code(self, text: str) -> str: ...

    def color(self, text: str, name: str) -> str: ...


class PlainStyler:
    """Styler that leaves every string as-is."""

    def text(self, text: str) -> str:
        return text

    def bold(self, text: str) -> str:
        return text

    def italic(self, text: str) -> str:
        return text

    def underline(self, text: str) -> str:
        return text

    def strike(self, text: str) -> str:
        return text

    def inline_code(self, text: str) -> str:
        return text

    def link(self, text: str) -> str:
        return text

    def highlight(self, text: str) -> str:
        return text

    def dim(self, text: str) -> str:
        return text

    def accent(self, text: str) -> str:
        return text

    def code(self, text: str) -> str:
        return text

    def color(self, text: str, name: str) -> str:
        return text


class MarkupStyler:
    """Styler that emits rich console markup."""

    @staticmethod
    def _wrap(text: str, style: str) -> str:
        # Tags are opened and closed on every line, so each output line is
        # valid markup by itself and block renderers may split on newlines.
        return "\n".join(
            f"[{style}]{line}[/{style}]" if line else line
            for line in text.split("\n")
        )

    def text(self, text: str) -> str:
        return escape_markup(text)

    def bold(self, text: str) -> str:
        return self._wrap(text, "bold")

    def italic(self, text: str) -> str:
        return self._wrap(text, "italic")

    def underline(self, text: str) -> str:
        return self._wrap(text, "underline")

    def strike(self, text: str) -> str:
        return self._wrap(text, "strike")

    def inline_code(self, text: str) -> str:
        return self._wrap(f" {text} ", "black on grey50")

    def link(self, text: str) -> str:
        return self._wrap(text, "underline cyan")

    def highlight(self, text: str) -> str:
        # textColor marks carry a color; we always use the same one.
        return self._wrap(text, "magenta")

    def dim(self, text: str) -> str:
        return self._wrap(text, "dim")

    def accent(self, text: str) -> str:
        return self._wrap(text, "cyan")

    def code(self, text: str) -> str:
        return self._wrap(text, "yellow")

    def color(self, text: str, name: str) -> str:
        return self._wrap(text, name)


PLAIN = PlainStyler()
MARKUP = MarkupStyler()
