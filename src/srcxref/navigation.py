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
Hyperlink markup for navigating between definitions: the per-line guide and
the fixed guide bar at the top of a page.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from typing_extensions import assert_never

from .buffer import Buffer
from .markup import Vocabulary

ABSENT: Final[int] = 0
"""
Slot value for "no such occurrence".
"""

PAGE_TOP: Final[int] = -1
"""
Slot value pointing at the top of the page.
"""

PAGE_BOTTOM: Final[int] = -2
"""
Slot value pointing at the bottom of the page.
"""


class Slot(IntEnum):
    """
    Entries of a guide, in the order they are rendered.
    """

    PREV = 0
    NEXT = 1
    FIRST = 2
    LAST = 3
    TOP = 4
    BOTTOM = 5
    INDEX = 6
    HELP = 7


@dataclass(frozen=True)
class NavRecord:
    """
    Navigation targets for one line. Each slot holds `ABSENT`, a line
    number, `PAGE_TOP` or `PAGE_BOTTOM`.
    """

    prev: int = ABSENT
    next: int = ABSENT
    first: int = ABSENT
    last: int = ABSENT
    top: int = ABSENT
    bottom: int = ABSENT

    def __getitem__(self, slot: Slot) -> int:
        """
        Value of a data-driven slot.
        """
        if slot is Slot.PREV:
            return self.prev
        elif slot is Slot.NEXT:
            return self.next
        elif slot is Slot.FIRST:
            return self.first
        elif slot is Slot.LAST:
            return self.last
        elif slot is Slot.TOP:
            return self.top
        elif slot is Slot.BOTTOM:
            return self.bottom
        raise KeyError(slot)


class Navigation:
    """
    Turns `NavRecord`s into markup.
    """

    vocabulary: Final[Vocabulary]
    icons: Final[bool]

    def __init__(self, vocabulary: Vocabulary, icons: bool) -> None:
        self.vocabulary = vocabulary
        self.icons = icons

    def _static_link(self, slot: Slot) -> str:
        name = "mains" if slot is Slot.INDEX else "help"
        return self.vocabulary.href_begin(
            "..", name, self.vocabulary.suffix, None
        )

    def _line_link(self, value: int) -> str:
        if value == PAGE_TOP:
            key = "TOP"
        elif value == PAGE_BOTTOM:
            key = "BOTTOM"
        else:
            key = str(value)
        return self.vocabulary.href_begin(None, None, None, key)

    def link_format(self, record: NavRecord) -> str:
        """
        Inline guide: previous, next, first, last, top, bottom, index and
        help. Slots that are absent are rendered without a link.
        """
        vocabulary = self.vocabulary
        labels = (
            vocabulary.anchor_comments
            if self.icons
            else vocabulary.anchor_labels
        )

        sb = Buffer()
        for slot in Slot:
            static = slot in (Slot.INDEX, Slot.HELP)
            linked = static or record[slot] != ABSENT

            if static:
                sb.append(self._static_link(slot))
            elif linked:
                sb.append(self._line_link(record[slot]))

            if self.icons:
                icon = vocabulary.anchor_icons[slot]
                if not linked:
                    icon = f"n_{icon}"
                sb.append(vocabulary.image(True, icon, labels[slot]))
            else:
                sb.append(f"[{labels[slot]}]")

            if linked:
                sb.append(vocabulary.href_end())

        return sb.text()

    def fixed_guide_link_format(self, record: NavRecord, anchors: str) -> str:
        """
        Fixed guide bar: every slot except previous and next, followed by
        the breadcrumb `anchors`.
        """
        vocabulary = self.vocabulary

        sb = Buffer()
        sb.append("<!-- beginning of fixed guide -->\n")
        sb.append(vocabulary.guide_begin)
        sb.push_back(0x0A)

        for slot in Slot:
            if slot is Slot.PREV or slot is Slot.NEXT:
                continue

            sb.append(vocabulary.guide_unit_begin)

            if slot is Slot.FIRST:
                if record.first == ABSENT:
                    sb.append(self._line_link(PAGE_TOP))
                else:
                    sb.append(self._line_link(record.first))
            elif slot is Slot.LAST:
                if record.last == ABSENT:
                    sb.append(self._line_link(PAGE_BOTTOM))
                else:
                    sb.append(self._line_link(record.last))
            elif slot is Slot.TOP:
                sb.append(self._line_link(PAGE_TOP))
            elif slot is Slot.BOTTOM:
                sb.append(self._line_link(PAGE_BOTTOM))
            elif slot is Slot.INDEX or slot is Slot.HELP:
                sb.append(self._static_link(slot))
            else:
                assert_never(slot)

            label = vocabulary.anchor_labels[slot]
            if self.icons:
                sb.append(
                    vocabulary.image(
                        True, vocabulary.anchor_icons[slot], label
                    )
                )
            else:
                sb.append(f"[{label}]")

            sb.append(vocabulary.href_end())
            sb.append(vocabulary.guide_unit_end)
            sb.push_back(0x0A)

        sb.append(vocabulary.guide_path_begin)
        sb.append(anchors)
        sb.append(vocabulary.guide_path_end)
        sb.push_back(0x0A)
        sb.append(vocabulary.guide_end)
        sb.push_back(0x0A)
        sb.append("<!-- end of fixed guide -->\n")

        return sb.text()
