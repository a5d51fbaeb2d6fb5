"""A single contiguous text replacement."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Splice:
    """Replace text[start:end] with `text`."""

    start: int
    end: int
    text: str

    def apply(self, source: str) -> str:
        return source[: self.start] + self.text + source[self.end :]

    @property
    def is_insert(self) -> bool:
        return self.start == self.end

    def minimized(self, source: str) -> Splice:
        """Shrink to the smallest range that still differs from source.

        Common leading and trailing characters between the replaced region
        and the replacement are dropped, so rewriting `[x: 10, y: 5]` to
        `[x: 12, y: 5]` becomes a one-character splice.
        """
        old = source[self.start : self.end]
        new = self.text
        prefix = 0
        limit = min(len(old), len(new))
        while prefix < limit and old[prefix] == new[prefix]:
            prefix += 1
        suffix = 0
        limit -= prefix
        while suffix < limit and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]:
            suffix += 1
        return Splice(
            self.start + prefix,
            self.end - suffix,
            new[prefix : len(new) - suffix],
        )
