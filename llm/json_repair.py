from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


_CLOSER_FOR = {"{": "}", "[": "]"}
_CLOSERS = frozenset(_CLOSER_FOR.values())
_JSON_WHITESPACE = frozenset(" \t\r\n")


@dataclass
class ScanState:
    """Bracket and string tracking for a single left-to-right pass.

    ``open_stack`` holds the closer expected for every container that is
    still open; its top closes the innermost one. ``escaped_prev`` is only
    set by an unescaped backslash, so ``\\\\`` does not escape what follows.
    """

    inside_string: bool = False
    escaped_prev: bool = False
    open_stack: List[str] = field(default_factory=list)

    def feed(self, ch: str) -> None:
        if ch == '"' and not self.escaped_prev:
            self.inside_string = not self.inside_string
        self.escaped_prev = ch == "\\" and not self.escaped_prev

        if self.inside_string:
            return
        if ch in _CLOSER_FOR:
            self.open_stack.append(_CLOSER_FOR[ch])
        elif ch in _CLOSERS:
            # A mismatched closer is ignored rather than unwinding the stack.
            if self.open_stack and self.open_stack[-1] == ch:
                self.open_stack.pop()

    @property
    def depth(self) -> int:
        return len(self.open_stack)

    def closing_suffix(self) -> str:
        suffix = '"' if self.inside_string else ""
        return suffix + "".join(reversed(self.open_stack))


def scan(text: str) -> ScanState:
    state = ScanState()
    for ch in text:
        state.feed(ch)
    return state


def repair_truncated_json(text: str) -> str:
    """Close a dangling string and every container left open in ``text``.

    Never raises. The result is balanced but may still fail strict parsing,
    e.g. when the text was cut right after a key.
    """
    return text + scan(text).closing_suffix()


def remove_trailing_commas(text: str) -> str:
    """Drop commas that are followed only by whitespace and then ``}`` or ``]``.

    Commas inside string literals are left alone.
    """
    state = ScanState()
    out: List[str] = []
    pending_comma = -1
    for ch in text:
        if state.inside_string:
            out.append(ch)
        elif ch == ",":
            pending_comma = len(out)
            out.append(ch)
        elif ch in _JSON_WHITESPACE:
            out.append(ch)
        elif ch in _CLOSERS and pending_comma >= 0:
            out[pending_comma] = ""
            pending_comma = -1
            out.append(ch)
        else:
            pending_comma = -1
            out.append(ch)
        state.feed(ch)
    return "".join(out)
