"""
printer.py

Indentation based debug rendering used by the tree_print() methods of
selectors, aliases and alias sets.
"""

from typing import List

INDENT = "  "


class IndentingPrinter:
    """Collects lines, prefixing each with the current indentation."""

    def __init__(self, indent: str = INDENT):
        self._indent = indent
        self._level = 0
        self._lines: List[str] = []

    def println(self, text: str) -> None:
        """Print text, one line per embedded line break."""
        for line in str(text).split("\n"):
            self._lines.append(self._indent * self._level + line)

    def indent(self) -> None:
        self._level += 1

    def outdent(self) -> None:
        if self._level == 0:
            raise ValueError("Cannot outdent below level 0")
        self._level -= 1

    @property
    def level(self) -> int:
        return self._level

    def text(self) -> str:
        """Return everything printed so far, each line newline terminated."""
        return "".join(line + "\n" for line in self._lines)

    def __str__(self) -> str:
        return self.text()


def tree_print(value) -> str:
    """Render any value with a tree_print(printer) method to text."""
    printer = IndentingPrinter()
    value.tree_print(printer)
    return printer.text()
