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


from pathlib import Path

import pytest

import srcxref

HEADER = "# Copyright (C) 2025 The srcxref Authors\n"
LICENSE = "# GNU General Public License for more details.\n"

MODULES = sorted(Path(srcxref.__file__).parent.rglob("*.py"))


@pytest.mark.parametrize("path", MODULES, ids=str)
def test_license_header(path: Path) -> None:
    text = path.read_text(encoding="utf-8")

    assert text.startswith(HEADER)
    assert LICENSE in text
