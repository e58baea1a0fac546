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
Mapping between source paths, opaque file identifiers and languages.
"""

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Dict, Mapping, Optional, Sequence
from urllib.parse import quote


class PathEncoder(ABC):
    """
    Converts paths to the identifiers used to name generated pages, and
    back.
    """

    @abstractmethod
    def path_to_id(self, path: str) -> str:
        """
        Identifier for `path`.
        """

    @abstractmethod
    def id_to_path(
        self, file_id: str, hint: Optional[str] = None
    ) -> Optional[str]:
        """
        Path for `file_id`, or `None` if it is unknown. `hint` may name the
        kind of entry expected.
        """


class PathMap(PathEncoder):
    """
    `PathEncoder` backed by a dictionary. Paths that were not known up front
    (typically directories) get the next free numeric identifier. A leading
    `./` is ignored.
    """

    _ids: Dict[str, str]
    _paths: Dict[str, str]
    _next: int

    def __init__(self, known: Optional[Mapping[str, str]] = None) -> None:
        self._ids = {}
        self._paths = {}
        self._next = 1

        for path, file_id in (known or {}).items():
            self.add(path, file_id)

    def add(self, path: str, file_id: str) -> None:
        """
        Register `path` under `file_id`.
        """
        path = strip_dot_slash(path)
        self._ids[path] = file_id
        self._paths[file_id] = path
        if file_id.isdigit():
            self._next = max(self._next, int(file_id) + 1)

    def path_to_id(self, path: str) -> str:
        """
        Identifier for `path`, allocating one if necessary.
        """
        path = strip_dot_slash(path)
        try:
            return self._ids[path]
        except KeyError:
            pass

        file_id = str(self._next)
        while file_id in self._paths:
            self._next += 1
            file_id = str(self._next)

        self.add(path, file_id)
        return file_id

    def id_to_path(
        self, file_id: str, hint: Optional[str] = None
    ) -> Optional[str]:
        """
        Path registered for `file_id`.
        """
        return self._paths.get(file_id)


class LanguageMap:
    """
    Decides the language of a file from its suffix.
    """

    _languages: Dict[str, str]

    def __init__(self, langmap: Mapping[str, Sequence[str]]) -> None:
        self._languages = {}
        for language, suffixes in langmap.items():
            for suffix in suffixes:
                self._languages.setdefault(suffix, language)

    def suffix_to_language(self, suffix: str) -> Optional[str]:
        """
        Language for `suffix` (including the leading dot), if any.
        """
        return self._languages.get(suffix)

    def language_of(self, path: str) -> Optional[str]:
        """
        Language for the suffix of `path`, if any.
        """
        suffix = PurePosixPath(path).suffix
        if not suffix:
            return None
        return self.suffix_to_language(suffix)


def url_encode(text: str) -> str:
    """
    Percent-encode everything that is not safe in a URL path.
    """
    return quote(text, safe="/")


def strip_dot_slash(path: str) -> str:
    """
    Remove a leading `./`.
    """
    if path.startswith("./"):
        return path[2:]
    return path
