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
Resolve a name occurrence into a hyperlink by consulting the tag store.
"""

from typing import Final, Optional

from .buffer import Buffer
from .context import RenderContext
from .diagnostics import RenderWarning, WarningSink
from .markup import Vocabulary
from .paths import strip_dot_slash, url_encode
from .settings import Options
from .tags import Aggregate, Single, TagKind, TagStore, Verb

SOURCES: Final[str] = "S"
"""
Directory holding the rendered source pages.
"""


def upperdir(directory: str) -> str:
    """
    Path of a sibling output directory, seen from inside a subdirectory.
    """
    return f"../{directory}"


def tooltip(verb: Verb, lineno: int, opt: Optional[str]) -> str:
    """
    Title text for a link.

    With a positive `lineno` this describes a single location, optionally
    in the file `opt`. Otherwise `opt` is the number of places.
    """
    if lineno > 0:
        text = f"{verb.single} {lineno}"
        if opt:
            text += f" in {opt}"
    else:
        text = f"Multiple {verb.multiple} {opt} places"
    return text + "."


class Resolver:
    """
    Turns one occurrence of a name into markup.
    """

    options: Final[Options]
    vocabulary: Final[Vocabulary]
    tags: Final[TagStore]
    warnings: Final[WarningSink]

    def __init__(
        self,
        options: Options,
        vocabulary: Vocabulary,
        tags: TagStore,
        warnings: WarningSink,
    ) -> None:
        self.options = options
        self.vocabulary = vocabulary
        self.tags = tags
        self.warnings = warnings

    def resolve(
        self,
        context: RenderContext,
        name: str,
        kind: TagKind,
        lineno: int,
        warn: Optional[bool] = None,
    ) -> str:
        """
        Markup for `name` occurring on `lineno` as `kind`.

        Names that cannot be found are returned as they are. `warn`
        overrides the `warnings` option.
        """
        if warn is None:
            warn = self.options.warnings

        resolution = self.tags.lookup(kind.namespace, name)

        if resolution is None:
            if kind.warns and warn:
                self.warnings(
                    RenderWarning(
                        f"{name} ({kind.value}) found but not defined.",
                        lineno,
                        context.path,
                    )
                )
                if self.options.colorize_warned_line:
                    context.warned = True
            return name

        # A symbol occurrence would only link to itself.
        if kind is TagKind.SYMBOL:
            return name

        if isinstance(resolution, Aggregate):
            return self._aggregate(name, kind, resolution)

        assert isinstance(resolution, Single)

        vocabulary = self.vocabulary
        path = strip_dot_slash(resolution.path)
        return (
            vocabulary.href_begin(
                upperdir(SOURCES),
                resolution.file_id,
                vocabulary.suffix,
                str(resolution.line),
                tooltip(kind.verb, resolution.line, path),
            )
            + name
            + vocabulary.href_end()
        )

    def resolve_forced(
        self, context: RenderContext, name: bytes, length: int, lineno: int
    ) -> str:
        """
        Resolve the first `length` bytes of `name` as a definition, without
        warning.
        """
        sb = Buffer()
        sb.append_slice(name, length)
        return self.resolve(
            context, sb.text(), TagKind.DEFINITION, lineno, warn=False
        )

    def _aggregate(
        self, name: str, kind: TagKind, resolution: Aggregate
    ) -> str:
        vocabulary = self.vocabulary
        namespace = kind.namespace
        title = tooltip(kind.verb, -1, str(resolution.count))

        directory: Optional[str]
        suffix: Optional[str]
        if self.options.dynamic:
            action = self.options.action
            query = f"{action}?pattern={url_encode(name)}&"
            if self.options.sitekey is not None:
                query += f"id={url_encode(self.options.sitekey)}&"
            query += f"type={namespace.query_type}"
            file = query
            directory = None if action.startswith("/") else ".."
            suffix = None
        else:
            directory = upperdir(namespace.directory)
            file = resolution.file_id
            suffix = vocabulary.suffix

        return (
            vocabulary.href_begin(directory, file, suffix, None, title)
            + name
            + vocabulary.href_end()
        )
