"""Fast line/column candidate extraction.

``LineColumnExtractor`` pairs up adjacent values from the numeric scan.
It does not check that the two numbers sat next to each other in the
source text; use ``StackParser`` when exact positions matter.
"""

from __future__ import annotations

from perflite.core.numeric_scanner import NumericScanner


class LineColumnExtractor:
    """Produces ``(line, column)`` candidates from digit runs.

    Example:
        extractor = LineColumnExtractor()
        extractor.extract_line_column_pairs("x:10:20")  # [(10, 20)]
    """

    def __init__(self, scanner: NumericScanner | None = None) -> None:
        self._scanner = scanner if scanner is not None else NumericScanner()

    @property
    def scanner(self) -> NumericScanner:
        return self._scanner

    def extract_line_column_pairs(self, text: str | bytes | None) -> list[tuple[int, int]]:
        """Pair every number with the one after it, in scan order.

        Args:
            text: Stack text

        Returns:
            Candidate pairs; empty when fewer than two numbers are found
        """
        numbers = self._scanner.extract_numbers(text)
        return list(zip(numbers, numbers[1:]))

    def extract_flat(self, text: str | bytes | None) -> list[int]:
        """Candidate pairs flattened to ``[line, column, line, column, ...]``."""
        return [value for pair in self.extract_line_column_pairs(text) for value in pair]
