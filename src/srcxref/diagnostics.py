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
Side channel for warnings produced while rendering.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List


@dataclass(frozen=True)
class RenderWarning:
    """
    Something in the input looked wrong, but rendering carried on.
    """

    message: str
    line: int
    path: str

    def __str__(self) -> str:
        """
        Human readable form, with an editor friendly position suffix.
        """
        return f"{self.message} [+{self.line} {self.path}]"


WarningSink = Callable[[RenderWarning], None]
"""
Receives every `RenderWarning`.
"""


def log_warning(warning: RenderWarning) -> None:
    """
    Default `WarningSink`: report through `logging`.
    """
    logging.warning("%s", warning)


class CollectingSink:
    """
    `WarningSink` that remembers everything it is given.
    """

    warnings: List[RenderWarning]

    def __init__(self) -> None:
        self.warnings = []

    def __call__(self, warning: RenderWarning) -> None:
        self.warnings.append(warning)
