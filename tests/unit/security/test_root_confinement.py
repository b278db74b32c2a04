from __future__ import annotations

from pathlib import Path

from docs_mcp.security import is_within_root


def test_root_itself_is_within_root(tmp_path: Path) -> None:
    assert is_within_root(tmp_path, tmp_path) is True


def test_sibling_with_shared_prefix_is_outside_root(tmp_path: Path) -> None:
    root = tmp_path / "docs"
    sibling = tmp_path / "docs-private"
    root.mkdir()
    sibling.mkdir()

    assert is_within_root(root, sibling / "secret.md") is False


def test_resolved_symlink_escaping_root_is_outside_root(tmp_path: Path) -> None:
    root = (tmp_path / "docs").resolve()
    outside = tmp_path / "outside"
    root.mkdir()
    outside.mkdir()
    (outside / "leak.md").write_text("secret", encoding="utf-8")
    (root / "link").symlink_to(outside, target_is_directory=True)

    target = (root / "link" / "leak.md").resolve()

    assert is_within_root(root, target) is False


def test_nested_path_is_within_root(tmp_path: Path) -> None:
    assert is_within_root(tmp_path, tmp_path / "guides" / "setup.md") is True
