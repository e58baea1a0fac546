# Copyright (C) 2025 The srcxref Authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""
Per-file index of tagged occurrences, used to build navigation.
"""

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import IO, Dict, Final, Iterable, Iterator, List, Optional, Tuple

import rich.markup
import rich.tree
from rich.console import Console

from .navigation import ABSENT, PAGE_BOTTOM, PAGE_TOP, NavRecord

TOP_OF_PAGE: Final[int] = 0
"""
Pseudo line number asking for the navigation at the top of a page.
"""

BOTTOM_OF_PAGE: Final[int] = -1
"""
Pseudo line number asking for the navigation at the bottom of a page.
"""

TYPES: Final[str] = "DRYMT"


@dataclass(frozen=True)
class Anchor:
    """
    One tagged occurrence in a file.

    `type` is `D` for a definition, `R` for a reference to a definition,
    `Y` for a symbol without a definition, and `M` or `T` for other
    references.
    """

    lineno: int
    type: str
    tag: str

    def __post_init__(self) -> None:
        if len(self.type) != 1 or self.type not in TYPES:
            raise ValueError(f"unknown anchor type `{self.type}`")
        if self.lineno < 1:
            raise ValueError(f"anchor on line {self.lineno}")


class AnchorIndex:
    """
    The anchors of a single file, sorted by line.
    """

    _anchors: List[Anchor]
    _definitions: List[int]
    _by_line: Dict[Tuple[int, str], Anchor]

    def __init__(self, anchors: Iterable[Anchor] = ()) -> None:
        self._anchors = sorted(anchors, key=lambda a: a.lineno)
        self._definitions = [
            a.lineno for a in self._anchors if a.type == "D"
        ]
        self._by_line = {}
        for anchor in self._anchors:
            self._by_line.setdefault((anchor.lineno, anchor.tag), anchor)

    def __iter__(self) -> Iterator[Anchor]:
        """
        All anchors, in line order.
        """
        return iter(self._anchors)

    def __len__(self) -> int:
        """
        Number of anchors.
        """
        return len(self._anchors)

    @property
    def first_definition(self) -> int:
        """
        Line of the first definition, or `ABSENT`.
        """
        return self._definitions[0] if self._definitions else ABSENT

    @property
    def last_definition(self) -> int:
        """
        Line of the last definition, or `ABSENT`.
        """
        return self._definitions[-1] if self._definitions else ABSENT

    def iterate_definitions(self) -> Iterator[Anchor]:
        """
        Definition anchors in line order. Each call starts over.
        """
        return (a for a in self._anchors if a.type == "D")

    def is_definition_line(self, lineno: int) -> bool:
        """
        `True` if something is defined on `lineno`.
        """
        index = bisect_left(self._definitions, lineno)
        return (
            index < len(self._definitions)
            and self._definitions[index] == lineno
        )

    def get(self, name: str, lineno: int) -> Optional[Anchor]:
        """
        The anchor for `name` on `lineno`, if there is one.
        """
        return self._by_line.get((lineno, name))

    def links_for(self, lineno: int) -> NavRecord:
        """
        Navigation targets for `lineno`, or for the top (`TOP_OF_PAGE`) or
        bottom (`BOTTOM_OF_PAGE`) of the page.
        """
        prev = next_ = ABSENT

        if lineno >= 1 and self._definitions:
            before = bisect_left(self._definitions, lineno)
            after = bisect_right(self._definitions, lineno)
            if before > 0:
                prev = self._definitions[before - 1]
            if after < len(self._definitions):
                next_ = self._definitions[after]

        first = self.first_definition
        last = self.last_definition
        single = first != ABSENT and first == last

        if first == lineno:
            first = ABSENT
        if last == lineno:
            last = ABSENT

        if single:
            # A lone definition is reached downwards from the top of the
            # page and upwards from the bottom.
            if lineno == TOP_OF_PAGE:
                last = ABSENT
            elif lineno == BOTTOM_OF_PAGE:
                first = ABSENT

        return NavRecord(
            prev=prev,
            next=next_,
            first=first,
            last=last,
            top=ABSENT if lineno == TOP_OF_PAGE else PAGE_TOP,
            bottom=ABSENT if lineno == BOTTOM_OF_PAGE else PAGE_BOTTOM,
        )

    def dump(self, file: Optional[IO[str]] = None) -> None:
        """
        Render the anchors to the console or given file as a tree.
        """
        root = rich.tree.Tree("anchors")
        lines: Dict[int, rich.tree.Tree] = {}

        for anchor in self._anchors:
            try:
                line = lines[anchor.lineno]
            except KeyError:
                line = root.add(f"line {anchor.lineno}")
                lines[anchor.lineno] = line
            line.add(f"{anchor.type} {rich.markup.escape(anchor.tag)}")

        console = Console(file=file)
        console.print(root)
