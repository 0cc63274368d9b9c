"""A single editable line with a prompt and a cursor."""

import re
from collections.abc import Callable

# Optional '[', then ESC, optional '[', parameters, and a final digit or letter, optional ']'
ANSI_MATCHER = re.compile(r"(\[)?\x1b(\[)?[;?\d]*[\dA-Za-z](\])?", re.ASCII)


def strip_ansi(text: str) -> str:
    """Return a copy of text without terminal escape sequences."""
    return ANSI_MATCHER.sub("", text)


class LineBuffer:
    """
    The text of one line entry, the cursor within it, and the prompt in front of it.

    The cursor indexes into the text only, never the prompt, and always stays
    within 0 and len(text) inclusive. A cursor equal to len(text) sits one
    position past the last character, ready for appending.
    """

    def __init__(
        self,
        prompt: str,
        text: str | None = "",
        on_create: Callable[["LineBuffer"], None] | None = None,
    ) -> None:
        """
        Create a new LineBuffer that shows prompt in front of text.

        The cursor starts at the end of text. When on_create is given, it is
        called with the new buffer before the constructor returns.
        """
        self._prompt = str(prompt)
        self._text = str(text) if text else ""
        self._cursor = len(self._text)
        if on_create:
            on_create(self)

    @property
    def prompt(self) -> str:
        """The prompt shown in front of the text."""
        return self._prompt

    @property
    def text(self) -> str:
        """The editable text."""
        return self._text

    @property
    def cursor(self) -> int:
        """The cursor position within the text."""
        return self._cursor

    def is_at_start(self) -> bool:
        """Return whether the cursor is at the beginning of the line."""
        return self._cursor == 0

    def is_at_end(self) -> bool:
        """Return whether the cursor is past the last character of the line."""
        return self._cursor == len(self._text)

    def is_empty(self) -> bool:
        """Return whether the line has no text."""
        return len(self._text) == 0

    def move_left(self, n: int = 1) -> int:
        """
        Move the cursor n characters to the left, stopping at the start of the line.

        Returns the new cursor position.
        """
        self._cursor = self._clamp(self._cursor - n)
        return self._cursor

    def move_right(self, n: int = 1) -> int:
        """
        Move the cursor n characters to the right, stopping at the end of the line.

        Returns the new cursor position.
        """
        self._cursor = self._clamp(self._cursor + n)
        return self._cursor

    def move_to_start(self) -> int:
        """Move the cursor to the beginning of the line and return it."""
        self._cursor = 0
        return self._cursor

    def move_to_end(self) -> int:
        """Move the cursor past the last character and return it."""
        self._cursor = len(self._text)
        return self._cursor

    def set_at(self, index: int | range | slice, chars: str) -> None:
        """
        Write chars into the line at index and leave the cursor after them.

        An index past the end of the line pads the gap with spaces first, so
        writing 'b' at index 5 of 'aaa' gives 'aaa  b'. An index at the last
        character appends after it, and an index at or before zero prepends.

        A range or slice index replaces that span of the text with chars and
        advances the cursor by len(chars). The caller must pass a contiguous
        span: a step other than 1 raises ValueError.
        """
        if isinstance(index, (range, slice)):
            self._splice(index, chars)
            return

        last_index = len(self._text) - 1
        if index <= 0:
            before_text = ""
            after_text = self._text
        elif index == last_index:
            before_text = self._text
            after_text = ""
        elif index > last_index:
            before_text = self._text
            after_text = " " * (index - len(self._text))
        else:
            before_text = self._text[:index]
            after_text = self._text[index:]

        if index > last_index:
            self._text = before_text + after_text + chars
        else:
            self._text = before_text + chars + after_text

        self._cursor = max(0, index) + len(chars)

    def read_at(self, index: int) -> str:
        """
        Return the character at index.

        The caller must ensure index validity: an out of range index raises
        IndexError exactly like indexing a str.
        """
        return self._text[index]

    def replace(self, text: str) -> None:
        """Replace the whole line with text and move the cursor past its end."""
        self._text = text
        self._cursor = len(self._text)

    def insert(self, chars: str) -> None:
        """Write chars at the cursor."""
        self.set_at(self._cursor, chars)

    def append(self, char: str) -> None:
        """Add char to the end of the line and advance the cursor by one."""
        self._text += char
        self._cursor = self._clamp(self._cursor + 1)

    def delete(self) -> None:
        """Remove the character under the cursor, if any."""
        self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]

    def remove(self) -> None:
        """Remove the character in front of the cursor, like backspace."""
        if self.is_at_start():
            return
        self.move_left()
        self.delete()

    def render(self) -> str:
        """Return the full line with the prompt."""
        return f"{self._prompt}{self._text}"

    def prompt_width(self) -> int:
        """Return the number of terminal columns used by the prompt."""
        return len(strip_ansi(self._prompt))

    def total_width(self) -> int:
        """Return the number of terminal columns used by the prompt and the text."""
        return self.prompt_width() + len(self._text)

    def _clamp(self, position: int) -> int:
        return max(0, min(len(self._text), position))

    def _splice(self, span: range | slice, chars: str) -> None:
        if span.step not in (None, 1):
            exception_message = f"Span must be contiguous, not step {span.step}"
            raise ValueError(exception_message)
        if isinstance(span, range):
            span = slice(span.start, span.stop)
        start, stop, _ = span.indices(len(self._text))
        stop = max(start, stop)
        self._text = self._text[:start] + chars + self._text[stop:]
        self._cursor = self._clamp(self._cursor + len(chars))

    def __getitem__(self, index: int) -> str:
        return self.read_at(index)

    def __setitem__(self, index: int | range | slice, chars: str) -> None:
        self.set_at(index, chars)

    def __len__(self) -> int:
        return self.total_width()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return self.render()
