"""Line and indentation builder used by the emitters."""
from contextlib import contextmanager
from typing import Iterator, List


class CodeWriter:
    def __init__(self, indent: str = "    "):
        self._lines: List[str] = []
        self._level = 0
        self._indent = indent

    def line(self, text: str = "") -> "CodeWriter":
        self._lines.append(self._indent * self._level + text if text else "")
        return self

    def lines(self, *texts: str) -> "CodeWriter":
        for text in texts:
            self.line(text)
        return self

    def blank(self) -> "CodeWriter":
        self._lines.append("")
        return self

    def indent(self) -> "CodeWriter":
        self._level += 1
        return self

    def dedent(self) -> "CodeWriter":
        self._level = max(0, self._level - 1)
        return self

    @contextmanager
    def indented(self) -> Iterator["CodeWriter"]:
        self.indent()
        try:
            yield self
        finally:
            self.dedent()

    @contextmanager
    def block(self, opener: str, closer: str = "}") -> Iterator["CodeWriter"]:
        """Brace-delimited block for Go and TypeScript output."""
        self.line(opener)
        self.indent()
        try:
            yield self
        finally:
            self.dedent()
            self.line(closer)

    def render(self) -> str:
        return "\n".join(self._lines) + "\n"

    def reset(self) -> None:
        self._lines = []
        self._level = 0
