from __future__ import annotations

from mathgame.workspace import cli


def test_init_creates_workspace_and_config(workspace_home, capsys):
    code = cli.main([])

    out = capsys.readouterr().out
    assert code == 0
    assert "Workspace ready" in out
    assert "Config:" in out and "(created)" in out
    assert (workspace_home / "logs").is_dir()
    assert (workspace_home / "config" / "mathgame.toml").is_file()


def test_init_keeps_existing_config(workspace_home, capsys):
    target = workspace_home / "config" / "mathgame.toml"
    target.parent.mkdir(parents=True)
    target.write_text("# mine\n", encoding="utf-8")

    code = cli.main([])

    assert code == 0
    assert "(exists)" in capsys.readouterr().out
    assert target.read_text(encoding="utf-8") == "# mine\n"


def test_init_supports_custom_path(tmp_path, capsys):
    target = tmp_path / "custom"

    code = cli.main(["--path", str(target), "--skip-config"])

    out = capsys.readouterr().out
    assert code == 0
    assert target.is_dir()
    assert str(target) in out
    assert not (target / "config" / "mathgame.toml").exists()


def test_init_quiet_mode(workspace_home, capsys):
    code = cli.main(["--quiet"])

    assert code == 0
    assert capsys.readouterr().out == ""


def test_init_reports_workspace_error(tmp_path, capsys):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    code = cli.main(["--path", str(blocker)])

    assert code == 1
    assert "not a directory" in capsys.readouterr().err
