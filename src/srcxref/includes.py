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
Which files include which.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .buffer import encode
from .errors import RecordError


@dataclass(frozen=True)
class Inclusion:
    """
    Everything known about one included base name.

    `files` are the paths that carry the name. `referrers` are raw
    `"<line> <path>"` records, one per `#include` of it.
    """

    id: int
    files: Sequence[str] = field(default_factory=tuple)
    referrers: Sequence[str] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        """
        Number of files carrying the name.
        """
        return len(self.files)

    @property
    def ref_count(self) -> int:
        """
        Number of places that include the name.
        """
        return len(self.referrers)

    def referrer(self, index: int = 0) -> Tuple[str, str]:
        """
        Split a referrer record into its line and path.
        """
        record = self.referrers[index]
        lineno, sep, path = record.partition(" ")
        if not sep or not lineno.isdigit() or not path:
            raise RecordError("malformed include referrer", encode(record))
        return lineno, path


class IncludeIndex:
    """
    `Inclusion`s keyed by base name.
    """

    _entries: Dict[str, Inclusion]

    def __init__(self, entries: Iterable[Tuple[str, Inclusion]] = ()) -> None:
        self._entries = dict(entries)

    def __len__(self) -> int:
        """
        Number of known names.
        """
        return len(self._entries)

    def get(self, basename: str) -> Optional[Inclusion]:
        """
        What is known about `basename`, if anything.
        """
        return self._entries.get(basename)

    def included(self, basename: str) -> Optional[Inclusion]:
        """
        The inclusion record for `basename`, if something includes it.
        """
        inclusion = self._entries.get(basename)
        if inclusion is None or not inclusion.referrers:
            return None
        return inclusion
