from __future__ import annotations

from pathlib import Path

import pytest

from dateprefix.local_paths import is_under, sibling_path


def test_is_under_true(tmp_path: Path) -> None:
    root = tmp_path / "root"
    child = root / "a" / "b"
    child.mkdir(parents=True)
    assert is_under(child, root)
    assert not is_under(tmp_path, root)


def test_sibling_path_plain_name(tmp_path: Path) -> None:
    assert sibling_path(tmp_path, "2023-07-10 Protokoll.docx") == tmp_path / "2023-07-10 Protokoll.docx"


@pytest.mark.parametrize("name", ["", ".", "..", "sub/x.txt", "../x.txt"])
def test_sibling_path_refuses_other_directories(tmp_path: Path, name: str) -> None:
    with pytest.raises(ValueError):
        sibling_path(tmp_path, name)
