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
Load the facts produced by an indexer: file identifiers, tags, anchors and
inclusions.

The facts are a JSON object:

```json
{
    "paths": {"bar.c": "3"},
    "definitions": {"foo": {"line": 42, "path": "bar.c"}},
    "references": {"bar": {"id": "9", "count": 5}},
    "symbols": {},
    "anchors": {"bar.c": [[42, "D", "foo"]]},
    "includes": {
        "bar.h": {"id": 1, "files": ["bar.h"], "referrers": ["3 bar.c"]}
    }
}
```

Every key is optional.
"""

import json
from pathlib import Path
from typing import Any, Dict, Final, List, Mapping

from .anchors import Anchor, AnchorIndex
from .errors import RenderError
from .includes import IncludeIndex, Inclusion
from .paths import PathMap, strip_dot_slash
from .tags import Namespace, TagCache

NAMESPACES: Final[Mapping[str, Namespace]] = {
    "definitions": Namespace.DEFINITIONS,
    "references": Namespace.REFERENCES,
    "symbols": Namespace.SYMBOLS,
}


class FactsError(RenderError):
    """
    The facts file could not be understood.
    """


class Facts:
    """
    Everything known about a tree of source files.
    """

    paths: Final[PathMap]
    tags: Final[TagCache]
    includes: Final[IncludeIndex]
    _anchors: Dict[str, List[Anchor]]

    def __init__(
        self,
        paths: PathMap,
        tags: TagCache,
        includes: IncludeIndex,
        anchors: Mapping[str, List[Anchor]],
    ) -> None:
        self.paths = paths
        self.tags = tags
        self.includes = includes
        self._anchors = {strip_dot_slash(k): v for k, v in anchors.items()}

    @classmethod
    def empty(cls) -> "Facts":
        """
        Facts for a tree nothing is known about.
        """
        return cls.from_mapping({})

    @classmethod
    def load(cls, path: Path) -> "Facts":
        """
        Read facts from a JSON file.
        """
        try:
            with path.open("rb") as f:
                data = json.load(f)
        except json.JSONDecodeError as error:
            raise FactsError(f"`{path}` is not valid JSON: {error}") from error

        if not isinstance(data, dict):
            raise FactsError(f"`{path}` must hold a JSON object")

        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Facts":
        """
        Build facts from already decoded JSON.
        """
        paths = PathMap(
            {p: str(i) for p, i in _table(data, "paths").items()}
        )

        tags = TagCache(paths)
        for key, namespace in NAMESPACES.items():
            for name, entry in _table(data, key).items():
                _put_tag(tags, namespace, name, entry)

        anchors: Dict[str, List[Anchor]] = {}
        for path, rows in _table(data, "anchors").items():
            anchors[path] = [_anchor(path, row) for row in rows]

        includes = IncludeIndex(
            (name, _inclusion(name, entry))
            for name, entry in _table(data, "includes").items()
        )

        return cls(paths, tags, includes, anchors)

    def anchors_for(self, path: str) -> AnchorIndex:
        """
        Anchor index of the file at `path`.
        """
        return AnchorIndex(self._anchors.get(strip_dot_slash(path), ()))


def _table(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise FactsError(f"`{key}` must be an object")
    return value


def _put_tag(
    tags: TagCache, namespace: Namespace, name: str, entry: Any
) -> None:
    if not isinstance(entry, dict):
        raise FactsError(f"tag `{name}` must be an object")

    try:
        if "count" in entry:
            tags.put_aggregate(
                namespace, name, str(entry["id"]), int(entry["count"])
            )
        else:
            tags.put_single(
                namespace, name, int(entry["line"]), str(entry["path"])
            )
    except (KeyError, TypeError, ValueError) as error:
        raise FactsError(f"tag `{name}` is incomplete: {error}") from error


def _anchor(path: str, row: Any) -> Anchor:
    try:
        lineno, type_, tag = row
        return Anchor(int(lineno), str(type_), str(tag))
    except (TypeError, ValueError) as error:
        raise FactsError(f"bad anchor {row!r} in `{path}`: {error}") from error


def _inclusion(name: str, entry: Any) -> Inclusion:
    if not isinstance(entry, dict):
        raise FactsError(f"include `{name}` must be an object")

    try:
        return Inclusion(
            id=int(entry["id"]),
            files=tuple(str(f) for f in entry["files"]),
            referrers=tuple(str(r) for r in entry.get("referrers", ())),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise FactsError(f"include `{name}` is incomplete: {error}") from error
