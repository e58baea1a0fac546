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
The tag vocabulary: every piece of markup the engine emits, and the helpers
that assemble links and anchors from it.
"""

import dataclasses
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

import markupsafe
from jinja2 import Environment, PackageLoader, select_autoescape

from .settings import SettingsError


def escape_attribute(value: str) -> str:
    """
    Escape a string for use inside a quoted attribute value.
    """
    return str(markupsafe.escape(value))


@dataclass(frozen=True)
class Vocabulary:
    """
    Markup strings used while rendering. Any of them can be replaced from
    the `[tool.srcxref.markup]` table.
    """

    body_begin: str = "<body>"
    body_end: str = "</body>"
    header_begin: str = "<h2 class='header'>"
    header_end: str = "</h2>"
    comment_begin: str = "<em class='comment'>"
    comment_end: str = "</em>"
    sharp_begin: str = "<em class='sharp'>"
    sharp_end: str = "</em>"
    brace_begin: str = "<em class='brace'>"
    brace_end: str = "</em>"
    reserved_begin: str = "<strong class='reserved'>"
    reserved_end: str = "</strong>"
    warned_line_begin: str = "<span class='curline'>"
    warned_line_end: str = "</span>"
    position_begin: str = "<em class='position'>"
    position_end: str = "</em>"
    guide_begin: str = "<div id='guide'><ul>"
    guide_end: str = "</ul></div>"
    guide_unit_begin: str = "<li>"
    guide_unit_end: str = "</li>"
    guide_path_begin: str = "<li class='path'>"
    guide_path_end: str = "</li>"
    cvslink_begin: str = "<span class='cvs'>"
    cvslink_end: str = "</span>"
    list_begin: str = "<ol>"
    list_end: str = "</ol>"
    item_begin: str = "<li>"
    item_end: str = "</li>"
    verbatim_begin: str = "<pre>"
    verbatim_end: str = "</pre>"
    hr: str = "<hr />"
    br: str = "<br />"
    empty_element: str = " /"

    quote_little: str = "&lt;"
    quote_great: str = "&gt;"
    quote_amp: str = "&amp;"
    quote_space: str = "&nbsp;"

    title_define_index: str = "DEFINITIONS"
    title_included_from: str = "INCLUDED FROM"
    definition_index_note: str = (
        "This source file includes following definitions."
    )

    suffix: str = "html"
    icon_dir: str = "icons"
    icon_suffix: str = "png"
    style_sheet: str = "style.css"
    generator: str = "srcxref"

    anchor_labels: Tuple[str, ...] = (
        "&lt;",
        "&gt;",
        "^",
        "v",
        "top",
        "bottom",
        "index",
        "help",
    )
    """
    Terse bracketed labels, in `Slot` order.
    """

    anchor_comments: Tuple[str, ...] = (
        "previous",
        "next",
        "first",
        "last",
        "top",
        "bottom",
        "index",
        "help",
    )
    """
    Descriptive labels used as alternate text for icons, in `Slot` order.
    """

    anchor_icons: Tuple[str, ...] = (
        "left",
        "right",
        "first",
        "last",
        "top",
        "bottom",
        "index",
        "help",
    )
    """
    Icon file names, in `Slot` order.
    """

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, object]) -> "Vocabulary":
        """
        Create a vocabulary with some strings replaced.
        """
        known = {f.name: f for f in dataclasses.fields(cls)}
        values = {}

        for key, value in overrides.items():
            try:
                default = known[key].default
            except KeyError:
                raise SettingsError(f"unknown markup string `{key}`") from None

            if isinstance(default, tuple):
                if not isinstance(value, list) or len(value) != len(default):
                    raise SettingsError(
                        f"`markup.{key}` must be a list of {len(default)}"
                        " strings"
                    )
                if any(not isinstance(v, str) for v in value):
                    raise SettingsError(f"`markup.{key}` must hold strings")
                values[key] = tuple(value)
            elif isinstance(value, str):
                values[key] = value
            else:
                raise SettingsError(f"`markup.{key}` must be a string")

        return cls(**values)

    def quote(self, c: str) -> Optional[str]:
        """
        Replacement for a character that cannot appear literally in the
        output, or `None`.
        """
        if c == "<":
            return self.quote_little
        elif c == ">":
            return self.quote_great
        elif c == "&":
            return self.quote_amp
        return None

    def quote_string(self, text: str) -> str:
        """
        `text` with every special character replaced.
        """
        return "".join(self.quote(c) or c for c in text)

    def href_begin(
        self,
        dir: Optional[str],
        file: Optional[str],
        suffix: Optional[str],
        key: Optional[str],
        title: Optional[str] = None,
    ) -> str:
        """
        Opening tag of a link to `dir/file.suffix#key`.

        Every component is optional. A key starting with a digit is a line
        number and gets the `L` prefix used by `name_number`.
        """
        target = ""
        if file:
            if dir:
                target += f"{dir}/"
            target += file
            if suffix:
                target += f".{suffix}"
        if key:
            prefix = "L" if key[0].isdigit() else ""
            target += f"#{prefix}{key}"

        tag = f"<a href='{escape_attribute(target)}'"
        if title is not None:
            tag += f" title='{escape_attribute(title)}'"
        return tag + ">"

    def href_begin_simple(self, url: str) -> str:
        """
        Opening tag of a link to an arbitrary URL.
        """
        return f"<a href='{escape_attribute(url)}'>"

    def href_end(self) -> str:
        """
        Closing tag of a link.
        """
        return "</a>"

    def name_number(self, lineno: int) -> str:
        """
        Anchor marking a line.
        """
        return f"<a id='L{lineno}' name='L{lineno}'></a>"

    def name_string(self, name: str) -> str:
        """
        Anchor with an arbitrary name.
        """
        name = escape_attribute(name)
        return f"<a id='{name}' name='{name}'></a>"

    def image(self, parent: bool, file: str, alt: str) -> str:
        """
        Icon image, optionally looked up in the parent directory.
        """
        dir = "../" if parent else ""
        src = f"{dir}{self.icon_dir}/{file}.{self.icon_suffix}"
        return (
            f"<img class='icon' src='{escape_attribute(src)}'"
            f" alt='[{alt}]'{self.empty_element}>"
        )


class Pages:
    """
    Renders the head and foot of every page from jinja2 templates.
    """

    environment: Environment

    def __init__(self) -> None:
        self.environment = Environment(
            loader=PackageLoader("srcxref"),
            autoescape=select_autoescape(
                enabled_extensions=("html",), default=True
            ),
        )

    def begin(self, vocabulary: Vocabulary, title: str, subdir: bool) -> str:
        """
        Everything up to (but excluding) the body.
        """
        template = self.environment.get_template("page_begin.html")
        style_sheet = vocabulary.style_sheet
        if subdir:
            style_sheet = f"../{style_sheet}"
        return template.render(
            title=title,
            style_sheet=style_sheet,
            generator=vocabulary.generator,
        )

    def end(self) -> str:
        """
        Everything after the body.
        """
        template = self.environment.get_template("page_end.html")
        return template.render()
