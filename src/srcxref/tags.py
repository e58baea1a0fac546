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
Symbol lookups: the three tag namespaces, the records they hold, and an
in-memory tag cache.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Optional, Union

from .buffer import Buffer, decode
from .errors import RecordError
from .paths import PathEncoder


class Namespace(Enum):
    """
    The three physically distinct tag stores.
    """

    DEFINITIONS = "definitions"
    REFERENCES = "references"
    SYMBOLS = "symbols"

    @property
    def query_type(self) -> str:
        """
        Value of the `type` parameter for dynamic query pages.
        """
        return _QUERY_TYPES[self]

    @property
    def directory(self) -> str:
        """
        Directory holding the static "multiple occurrences" pages.
        """
        return _DIRECTORIES[self]


_QUERY_TYPES: Final[Dict[Namespace, str]] = {
    Namespace.DEFINITIONS: "definitions",
    Namespace.REFERENCES: "reference",
    Namespace.SYMBOLS: "symbol",
}

_DIRECTORIES: Final[Dict[Namespace, str]] = {
    Namespace.DEFINITIONS: "D",
    Namespace.REFERENCES: "R",
    Namespace.SYMBOLS: "Y",
}


@dataclass(frozen=True)
class Verb:
    """
    Wording of a tooltip, for one and for several occurrences.
    """

    single: str
    multiple: str


DEFINED: Final[Verb] = Verb("Defined at", "defined in")
USED: Final[Verb] = Verb("Used at", "used in")
REFERRED: Final[Verb] = Verb("Referred from", "referred from")
INCLUDED: Final[Verb] = Verb("Included from", "included from")


class TagKind(Enum):
    """
    Role of a name occurrence that is about to be linked.
    """

    DEFINITION = "definition"
    """
    Link to where the name is defined.
    """

    REFERENCE = "reference"
    """
    Link to where the name is used.
    """

    SYMBOL = "symbol"
    """
    Link to other occurrences of a name that has no definition.
    """

    OTHER_REFERENCE = "other-reference"
    """
    Link from a definition (or macro/type) to what refers to it.
    """

    @property
    def namespace(self) -> Namespace:
        """
        Which store to query.
        """
        return _NAMESPACES[self]

    @property
    def verb(self) -> Verb:
        """
        Tooltip wording.
        """
        return _VERBS[self]

    @property
    def warns(self) -> bool:
        """
        Whether failing to find the name is worth a warning.
        """
        return self in (TagKind.DEFINITION, TagKind.REFERENCE)

    @classmethod
    def from_anchor_type(cls, type_: str) -> "TagKind":
        """
        Kind to use for an occurrence the anchor index classified as
        `type_` (`D`, `R`, `Y`, `M` or `T`).
        """
        try:
            return _ANCHOR_TYPES[type_]
        except KeyError:
            raise ValueError(f"unknown anchor type `{type_}`") from None


_NAMESPACES: Final[Dict[TagKind, Namespace]] = {
    TagKind.DEFINITION: Namespace.DEFINITIONS,
    TagKind.REFERENCE: Namespace.REFERENCES,
    TagKind.SYMBOL: Namespace.SYMBOLS,
    TagKind.OTHER_REFERENCE: Namespace.REFERENCES,
}

_VERBS: Final[Dict[TagKind, Verb]] = {
    TagKind.DEFINITION: DEFINED,
    TagKind.REFERENCE: USED,
    TagKind.SYMBOL: USED,
    TagKind.OTHER_REFERENCE: REFERRED,
}

_ANCHOR_TYPES: Final[Dict[str, TagKind]] = {
    "R": TagKind.DEFINITION,
    "Y": TagKind.SYMBOL,
    "D": TagKind.OTHER_REFERENCE,
    "M": TagKind.OTHER_REFERENCE,
    "T": TagKind.OTHER_REFERENCE,
}


@dataclass(frozen=True)
class Single:
    """
    The name occurs exactly once.
    """

    line: int
    file_id: str
    path: str


@dataclass(frozen=True)
class Aggregate:
    """
    The name occurs `count` times; the per-occurrence list lives on a
    separate page.
    """

    file_id: str
    count: int


Resolution = Union[Single, Aggregate]


class TagStore(ABC):
    """
    Read-only access to the tag namespaces.
    """

    @abstractmethod
    def lookup(self, namespace: Namespace, name: str) -> Optional[Resolution]:
        """
        Find `name` in `namespace`, returning `None` when it isn't there.
        """

    @abstractmethod
    def is_empty(self, namespace: Namespace) -> bool:
        """
        `True` if `namespace` holds no names at all.
        """


def encode_single(line: int, file_id: str) -> bytes:
    """
    Raw cache record for a name with one occurrence.
    """
    sb = Buffer()
    sb.append_number(line)
    sb.push_back(0)
    sb.append(file_id)
    return sb.value()


def encode_aggregate(file_id: str, count: int) -> bytes:
    """
    Raw cache record for a name with several occurrences.
    """
    sb = Buffer()
    sb.push_back(0x20)
    sb.append(file_id)
    sb.push_back(0)
    sb.append_number(count)
    return sb.value()


def parse_record(raw: bytes, paths: PathEncoder) -> Resolution:
    """
    Decode a raw cache record.

    Aggregate records start with a space: `" <fid>\\0<count>"`. Anything
    else is a single record: `"<line>\\0<fid>"`.
    """
    if raw.startswith(b" "):
        fields = raw[1:].split(b"\0")
        if len(fields) < 2 or not fields[1].isdigit():
            raise RecordError("aggregate record without a count", raw)
        return Aggregate(file_id=decode(fields[0]), count=int(fields[1]))

    fields = raw.split(b"\0")
    if len(fields) < 2 or not fields[0].isdigit() or not fields[1]:
        raise RecordError("malformed single record", raw)

    file_id = decode(fields[1])
    path = paths.id_to_path(file_id)
    if path is None:
        raise RecordError("record refers to an unknown file", raw)

    return Single(line=int(fields[0]), file_id=file_id, path=path)


class TagCache(TagStore):
    """
    In-memory `TagStore` holding raw cache records.
    """

    _records: Dict[Namespace, Dict[str, bytes]]
    _parsed: Dict[Namespace, Dict[str, Resolution]]
    paths: Final[PathEncoder]

    def __init__(self, paths: PathEncoder) -> None:
        self.paths = paths
        self._records = {n: {} for n in Namespace}
        self._parsed = {n: {} for n in Namespace}

    def put(self, namespace: Namespace, name: str, raw: bytes) -> None:
        """
        Store a raw record, replacing any earlier one for `name`.
        """
        sb = Buffer()
        sb.append_slice(raw, len(raw))
        self._records[namespace][name] = sb.value()
        self._parsed[namespace].pop(name, None)

    def put_single(
        self, namespace: Namespace, name: str, line: int, path: str
    ) -> None:
        """
        Record that `name` occurs once, at `line` of `path`.
        """
        self.put(
            namespace, name, encode_single(line, self.paths.path_to_id(path))
        )

    def put_aggregate(
        self, namespace: Namespace, name: str, file_id: str, count: int
    ) -> None:
        """
        Record that `name` occurs `count` times.
        """
        self.put(namespace, name, encode_aggregate(file_id, count))

    def lookup(self, namespace: Namespace, name: str) -> Optional[Resolution]:
        """
        Find `name` in `namespace`.
        """
        parsed = self._parsed[namespace]
        try:
            return parsed[name]
        except KeyError:
            pass

        try:
            raw = self._records[namespace][name]
        except KeyError:
            return None

        resolution = parse_record(raw, self.paths)
        parsed[name] = resolution
        return resolution

    def is_empty(self, namespace: Namespace) -> bool:
        """
        `True` if `namespace` holds no names at all.
        """
        return not self._records[namespace]

