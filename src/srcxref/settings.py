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
Find and load configuration.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from itertools import chain, islice
from pathlib import Path, PurePath
from typing import Any, Dict, Optional, Tuple

import tomli

MAX_DEPTH = 10
FILE_NAME = "pyproject.toml"


class SettingsError(Exception):
    """
    An error encountered while attempting to load the settings.
    """


class HeaderPosition(Enum):
    """
    Where the guide for a definition line is placed.
    """

    NONE = "none"
    BEFORE = "before"
    RIGHT = "right"
    AFTER = "after"


DEFAULT_LANGMAP: Dict[str, Tuple[str, ...]] = {
    "c": (".c", ".h"),
    "yacc": (".y",),
    "asm": (".s", ".S"),
    "java": (".java",),
    "cpp": (".c++", ".cc", ".hh", ".cpp", ".cxx", ".hxx", ".hpp", ".C", ".H"),
    "php": (".php", ".php3", ".phtml"),
}


@dataclass(frozen=True)
class Options:
    """
    Switches controlling how a file is rendered.
    """

    warnings: bool = False
    """
    Report symbols that are found but not defined.
    """

    colorize_warned_line: bool = True
    """
    Wrap lines with warnings in the warned line markers.
    """

    icons: bool = False
    """
    Render navigation as icons instead of bracketed labels.
    """

    header_position: HeaderPosition = HeaderPosition.NONE
    """
    Placement of the guide on definition lines.
    """

    line_numbers: bool = False
    number_width: int = 4

    show_position: bool = False
    """
    Append `[+line path]` to navigation comments.
    """

    fixed_guide: bool = False
    dynamic: bool = False
    action: str = "cgi-bin/global.cgi"
    sitekey: Optional[str] = None

    insert_header: Optional[Path] = None
    insert_footer: Optional[Path] = None

    cvsweb_url: Optional[str] = None
    cvsweb_cvsroot: Optional[str] = None
    use_cvs_module: bool = False

    tabs: int = 8
    compress: bool = False

    langmap: Dict[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_LANGMAP)
    )

    @classmethod
    def from_mapping(
        cls, config: "Mapping[str, Any]", settings: Optional["Settings"] = None
    ) -> "Options":
        """
        Build `Options` from a `[tool.srcxref]` style table.
        """
        values: Dict[str, Any] = {}
        known = {f.name: f for f in dataclasses.fields(cls)}

        for key, value in config.items():
            if key in ("markup", "output"):
                continue

            if key not in known:
                raise SettingsError(f"unknown setting `{key}`")

            values[key] = _convert(key, value, settings)

        return cls(**values)


_BOOLS = frozenset(
    {
        "warnings",
        "colorize_warned_line",
        "icons",
        "line_numbers",
        "show_position",
        "fixed_guide",
        "dynamic",
        "use_cvs_module",
        "compress",
    }
)
_INTS = frozenset({"number_width", "tabs"})
_STRS = frozenset({"action", "sitekey", "cvsweb_url", "cvsweb_cvsroot"})
_PATHS = frozenset({"insert_header", "insert_footer"})


def _convert(key: str, value: object, settings: Optional["Settings"]) -> Any:
    if key in _BOOLS:
        if not isinstance(value, bool):
            raise SettingsError(f"`{key}` must be boolean")
        return value

    if key in _INTS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SettingsError(f"`{key}` must be an integer")
        if value < 1:
            raise SettingsError(f"`{key}` must be positive")
        return value

    if key in _STRS:
        if not isinstance(value, str):
            raise SettingsError(f"`{key}` must be a string")
        return value

    if key in _PATHS:
        if not isinstance(value, str):
            raise SettingsError(f"`{key}` must be a path string")
        if settings is None:
            return Path(value)
        return settings.resolve_path(PurePath(value))

    if key == "header_position":
        try:
            return HeaderPosition(value)
        except ValueError as error:
            choices = ", ".join(p.value for p in HeaderPosition)
            raise SettingsError(
                f"`header_position` must be one of: {choices}"
            ) from error

    if key == "langmap":
        if not isinstance(value, dict):
            raise SettingsError("`langmap` must be a table")
        langmap = {}
        for language, suffixes in value.items():
            if not isinstance(suffixes, list) or any(
                not isinstance(s, str) for s in suffixes
            ):
                raise SettingsError(
                    f"`langmap.{language}` must be a list of strings"
                )
            langmap[language] = tuple(suffixes)
        return langmap

    raise SettingsError(f"unknown setting `{key}`")


class Settings:
    """
    Handles loading settings for rendering.
    """

    _settings: Dict[str, Any]
    _root: Path

    def __init__(
        self, path: Path, settings: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Load the settings in the nearest configuration file to path, or use
        the given table directly.
        """
        if settings is not None:
            self._root = path
            self._settings = settings
            return

        settings_bytes = None

        search_directories = islice(chain([path], path.parents), MAX_DEPTH)

        for current_directory in search_directories:
            settings_file = current_directory / FILE_NAME
            try:
                settings_bytes = settings_file.read_bytes()
                self._root = settings_file.parent
                break
            except FileNotFoundError:
                pass

        if settings_bytes is None:
            raise SettingsError(
                f"could not find {FILE_NAME} (max depth: {MAX_DEPTH})"
            )

        settings_toml = tomli.load(BytesIO(settings_bytes))

        try:
            self._settings = settings_toml["tool"]["srcxref"]
        except KeyError:
            self._settings = {}

    @property
    def root(self) -> Path:
        """
        Directory containing the configuration file.
        """
        return self._root

    @property
    def options(self) -> Options:
        """
        Rendering switches.
        """
        return Options.from_mapping(self._settings, self)

    @property
    def markup(self) -> "Mapping[str, object]":
        """
        Overrides for the tag vocabulary.
        """
        try:
            markup = self._settings["markup"]
        except KeyError:
            return {}

        if not isinstance(markup, dict):
            raise SettingsError("`markup` must be a table")

        return markup

    @property
    def output(self) -> Optional[Path]:
        """
        Default output directory, if configured.
        """
        try:
            output = self._settings["output"]
        except KeyError:
            return None

        if not isinstance(output, str):
            raise SettingsError("`output` must be a path string")

        return self.resolve_path(PurePath(output))

    def resolve_path(self, path: PurePath) -> Path:
        """
        Convert the given path to an absolute path relative to the settings
        file.
        """
        joined = self._root / path
        resolved = joined.resolve()

        # relative_to raises an error if the argument isn't a super-path.
        resolved.relative_to(self._root.resolve())

        return resolved
