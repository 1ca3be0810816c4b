"""Tests for the strip_attrs script."""

from __future__ import annotations

import sys

import pytest

import strip_attrs

PLAYER = b'public class Player : MonoBehaviour\r\n{\r\n    [FormerlySerializedAs("hp"), SerializeField] // health\r\n    int health;\r\n}\r\n'


@pytest.fixture()
def project(tmp_path):
    scripts = tmp_path / "Assets" / "Scripts"
    (scripts / "Enemies").mkdir(parents=True)
    (scripts / "Player.cs").write_bytes(PLAYER)
    (scripts / "Enemies" / "Enemy.CS").write_bytes(b'[FormerlySerializedAs("a")]\n[FormerlySerializedAs("b")]\nint a;\n')
    (scripts / "Clean.cs").write_bytes(b"[SerializeField] int a;\n")
    (scripts / "notes.txt").write_bytes(b'[FormerlySerializedAs("a")]\n')
    return tmp_path


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["strip_attrs.py", *args])
    strip_attrs.main()


def test_iter_scripts(project):
    root = project / "Assets" / "Scripts"
    found = [p.relative_to(root).as_posix() for p in strip_attrs.iter_scripts(root)]
    assert found == ["Clean.cs", "Enemies/Enemy.CS", "Player.cs"]
    assert list(strip_attrs.iter_scripts(root / "Player.cs")) == [root / "Player.cs"]
    assert list(strip_attrs.iter_scripts(root / "notes.txt")) == []


def test_strip_file_keeps_crlf(project):
    path = project / "Assets" / "Scripts" / "Player.cs"
    assert strip_attrs.strip_file(path, ["FormerlySerializedAs"]) == 1
    assert path.read_bytes() == PLAYER.replace(b'FormerlySerializedAs("hp"), ', b"")


def test_strip_file_dry_run(project):
    path = project / "Assets" / "Scripts" / "Player.cs"
    assert strip_attrs.strip_file(path, ["FormerlySerializedAs"], dry_run=True) == 1
    assert path.read_bytes() == PLAYER


def test_strip_file_does_not_touch_clean_files(project):
    path = project / "Assets" / "Scripts" / "Clean.cs"
    before = path.stat().st_mtime_ns
    assert strip_attrs.strip_file(path, ["FormerlySerializedAs"]) == 0
    assert path.stat().st_mtime_ns == before


def test_strip_file_several_attributes(tmp_path):
    path = tmp_path / "A.cs"
    path.write_bytes(b"[Obsolete, FormerlySerializedAs(\"x\"), SerializeField]\nint a;\n")
    assert strip_attrs.strip_file(path, ["FormerlySerializedAs", "Obsolete"]) == 2
    assert path.read_bytes() == b"[SerializeField]\nint a;\n"


def test_strip_file_undecodable_bytes_survive(tmp_path):
    path = tmp_path / "A.cs"
    path.write_bytes(b'// caf\xe9\n[FormerlySerializedAs("x"), SerializeField]\nint a;\n')
    assert strip_attrs.strip_file(path, ["FormerlySerializedAs"]) == 1
    assert path.read_bytes() == b"// caf\xe9\n[SerializeField]\nint a;\n"


def test_main_directory(project, monkeypatch, capsys):
    run(monkeypatch, str(project))
    out = capsys.readouterr().out
    assert "Processed 3 script(s). Removed 3 FormerlySerializedAs attributes." in out
    enemy = project / "Assets" / "Scripts" / "Enemies" / "Enemy.CS"
    assert enemy.read_bytes() == b"\nint a;\n"
    assert (project / "Assets" / "Scripts" / "notes.txt").read_bytes() == b'[FormerlySerializedAs("a")]\n'


def test_main_keep_blank_lines(project, monkeypatch, capsys):
    run(monkeypatch, "--keep-blank-lines", str(project / "Assets" / "Scripts" / "Enemies"))
    enemy = project / "Assets" / "Scripts" / "Enemies" / "Enemy.CS"
    assert enemy.read_bytes() == b"\n\nint a;\n"


def test_main_dry_run(project, monkeypatch, capsys):
    run(monkeypatch, "--dry-run", str(project))
    out = capsys.readouterr().out
    assert "Enemy.CS: 2 attributes" in out
    assert "Would remove 3 FormerlySerializedAs attributes." in out
    assert (project / "Assets" / "Scripts" / "Player.cs").read_bytes() == PLAYER


def test_main_nothing_found(project, monkeypatch, capsys):
    run(monkeypatch, "--attribute=Obsolete", str(project))
    out = capsys.readouterr().out
    assert "Processed 3 script(s). No Obsolete attributes found." in out


def test_main_attribute_option_with_separate_value(project, monkeypatch, capsys):
    run(monkeypatch, "--attribute", "SerializeField", str(project / "Assets" / "Scripts" / "Clean.cs"))
    out = capsys.readouterr().out
    assert "Processed 1 script(s). Removed 1 SerializeField attributes." in out
    assert (project / "Assets" / "Scripts" / "Clean.cs").read_bytes() == b"int a;\n"


def test_main_empty_directory(tmp_path, monkeypatch, capsys):
    (tmp_path / "empty").mkdir()
    run(monkeypatch, str(tmp_path / "empty"))
    assert f"No C# scripts found in {tmp_path / 'empty'}" in capsys.readouterr().out


def test_main_missing_path(tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, str(tmp_path / "missing"))
    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().out


@pytest.mark.parametrize("args", [["--attribute=not valid"], ["--attribute"], ["--bogus"]])
def test_main_bad_arguments(tmp_path, monkeypatch, args):
    with pytest.raises(SystemExit) as exc:
        run(monkeypatch, *args, str(tmp_path))
    assert exc.value.code == 1
