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


import json
import sys
from pathlib import Path

import pytest

from srcxref import cli


@pytest.fixture
def tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.srcxref]\noutput = "out"\n'
    )
    (tmp_path / "foo.c").write_text("int main;\nint x = main;\n")
    (tmp_path / "facts.json").write_text(
        json.dumps(
            {
                "paths": {"foo.c": "7"},
                "definitions": {"main": {"line": 1, "path": "foo.c"}},
                "anchors": {"foo.c": [[1, "D", "main"], [2, "R", "main"]]},
            }
        )
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["srcxref", *args])
    cli.main()


def test_render(tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    run(monkeypatch, "--facts", "facts.json", "./foo.c")

    page = (tree / "out" / "S" / "7.html").read_text()
    assert "<title>foo.c</title>" in page
    assert "<a href='../S/7.html#L1'" in page


def test_output_argument(
    tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    run(monkeypatch, "--output", "elsewhere", "--not-source", "foo.c")

    page = (tree / "elsewhere" / "S" / "1.html").read_text()
    assert "int main;" in page


def test_dump_anchors(
    tree: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    run(monkeypatch, "--facts", "facts.json", "--dump-anchors", "foo.c")

    out = capsys.readouterr().out
    assert "D main" in out
    assert "R main" in out
    assert not (tree / "out").exists()


def test_missing_source(tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, "missing.c")

    assert excinfo.value.code == 1


def test_bad_facts(tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tree / "facts.json").write_text("[")

    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, "--facts", "facts.json", "foo.c")

    assert excinfo.value.code == 1


def test_output_required(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "pyproject.toml").write_text("")
    (tmp_path / "foo.c").write_text("int x;\n")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, "foo.c")

    assert excinfo.value.code == 1
