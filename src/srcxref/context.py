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
State carried through the rendering of a single file.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class LineState(Enum):
    """
    Position of the line emission state machine.
    """

    AWAITING_LINE = auto()
    IN_LINE = auto()
    FLUSHING = auto()


@dataclass
class RenderContext:
    """
    Per-file rendering state. Created when a file is opened and dropped
    when it is closed; never shared between files.
    """

    path: str
    """
    Path of the source being rendered, as shown to readers.
    """

    lineno: int = 0
    """
    Line currently being assembled.
    """

    last_lineno: int = 0
    """
    Last line written to the output.
    """

    warned: bool = False
    """
    The current line holds something worth highlighting.
    """

    guide: Optional[str] = None
    """
    Definition guide waiting to be placed around the current line.
    """

    state: LineState = LineState.AWAITING_LINE
