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
Load tokenizers contributed by other distributions.
"""

import sys
from inspect import isabstract
from typing import Iterator, Tuple, Type, TypeVar

from .errors import RenderError

if sys.version_info < (3, 10):
    from importlib_metadata import entry_points
else:
    from importlib.metadata import entry_points

GROUP = "srcxref.tokenizers"
"""
Entry point group searched for tokenizers.
"""


class PluginError(RenderError):
    """
    A registered plugin could not be used.
    """


L = TypeVar("L")


def load_plugins(
    base: Type[L], group: str = GROUP
) -> Iterator[Tuple[str, Type[L]]]:
    """
    Yield every concrete subclass of `base` registered under `group`, with
    its entry point name, in name order.
    """
    found = sorted(entry_points(group=group), key=lambda e: e.name)

    for entry in found:
        class_ = entry.load()

        if not isinstance(class_, type) or not issubclass(class_, base):
            raise PluginError(
                f"entry point `{entry.name}` ({class_!r}) is not a {base}"
            )

        if isabstract(class_):
            raise PluginError(f"entry point `{entry.name}` is abstract")

        yield entry.name, class_
