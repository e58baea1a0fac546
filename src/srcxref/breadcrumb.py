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
Breadcrumbs: a path rendered as a chain of links to its directories.
"""

from typing import Optional

from .buffer import Buffer
from .markup import Vocabulary
from .paths import PathEncoder

FILES = "files"
"""
Directory holding directory listing pages.
"""


def fill_anchor(
    vocabulary: Vocabulary,
    paths: PathEncoder,
    root: Optional[str],
    path: str,
) -> str:
    """
    Render `path` as links.

    With `root`, the chain starts with a `root` link to it. Every directory
    component links to its listing page under `../files`; the last
    component links to the page of the file itself, which sits in the same
    directory as the page being written.
    """
    components = [c for c in path.split("/") if c]

    sb = Buffer()
    if root is not None:
        sb.append(vocabulary.href_begin_simple(root))
        sb.append("root")
        sb.append(vocabulary.href_end())
        sb.push_back(0x2F)

    if not components:
        return sb.text()

    *directories, last = components

    for index, unit in enumerate(directories):
        prefix = "/".join(directories[: index + 1])
        sb.append(
            vocabulary.href_begin(
                f"../{FILES}",
                paths.path_to_id(prefix),
                vocabulary.suffix,
                None,
            )
        )
        sb.append(vocabulary.quote_string(unit))
        sb.append(vocabulary.href_end())
        sb.push_back(0x2F)

    sb.append(
        vocabulary.href_begin(
            None, paths.path_to_id(path), vocabulary.suffix, None
        )
    )
    sb.append(vocabulary.quote_string(last))
    sb.append(vocabulary.href_end())

    return sb.text()
