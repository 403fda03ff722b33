"""
Tests for the init_file_storage script
"""
from scripts.init_file_storage import (DIRECTORIES, GITIGNORE_CONTENT,
                                       GITIGNORE_DIRS, init_file_storage, main)


def test_creates_layout(tmp_path):
    base = tmp_path / "uploads"

    report = init_file_storage(str(base))

    for relative in DIRECTORIES:
        assert (base / relative).is_dir()
    for relative in GITIGNORE_DIRS:
        assert (base / relative / ".gitignore").read_text() == GITIGNORE_CONTENT
    assert "project-<project id>" in (base / "ProjectFiles" / "README.md").read_text()
    assert report["existing"] == []


def test_is_idempotent(tmp_path):
    base = tmp_path / "uploads"
    init_file_storage(str(base))
    (base / "ProjectFiles" / ".gitignore").write_text("custom\n")

    report = init_file_storage(str(base))

    assert report["created"] == []
    assert (base / "ProjectFiles" / ".gitignore").read_text() == "custom\n"


def test_main_prints_report(tmp_path, capsys):
    base = tmp_path / "storage"

    assert main(["--base", str(base)]) == 0

    output = capsys.readouterr().out
    assert "created" in output
    assert (base / "videos").is_dir()
