from bisect import bisect_right
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class LineCol:
    """Zero-based line and column."""

    line: int
    col: int


class LineIndex:
    def __init__(self, text: str):
        self.text = text
        self._line_starts: List[int] = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    def line_col(self, offset: int) -> LineCol:
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self._line_starts, offset) - 1
        return LineCol(line, offset - self._line_starts[line])

    def offset(self, line_col: LineCol) -> int:
        if not 0 <= line_col.line < len(self._line_starts):
            raise ValueError(
                f"Line {line_col.line} out of range (file has {len(self._line_starts)} lines)"
            )
        start = self._line_starts[line_col.line]
        if line_col.line + 1 < len(self._line_starts):
            line_end = self._line_starts[line_col.line + 1] - 1
        else:
            line_end = len(self.text)
        return min(start + line_col.col, line_end)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)
