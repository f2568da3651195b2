from pathlib import Path

from tokengrid.cli.play import main


def test_play_launcher_passes_config_and_save_dir(tmp_path: Path, monkeypatch) -> None:
    captured = {}

    def fake_run(config, **kwargs):
        captured["config"] = config
        captured.update(kwargs)
        return 0

    monkeypatch.setattr("tokengrid.cli.play.run_pygame_viewer", fake_run)

    result = main(["--headless", "--seed", "17", "--save-dir", str(tmp_path)])

    assert result == 0
    assert captured["config"].seed == 17
    assert captured["save_dir"] == str(tmp_path)
    assert captured["headless"] is True
    assert captured["reset"] is False


def test_play_launcher_ascii_reset_clears_save(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "overrides.json").write_text('{"1,1":2}', encoding="utf-8")
    inputs = iter(["show", "quit"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(inputs))

    result = main(["--ascii", "--reset", "--save-dir", str(tmp_path)])

    assert result == 0
    assert (tmp_path / "overrides.json").read_text(encoding="utf-8") == "{}"


def test_play_launcher_ascii_refuses_corrupt_save(tmp_path: Path, capsys) -> None:
    (tmp_path / "overrides.json").write_text("{oops", encoding="utf-8")

    result = main(["--ascii", "--save-dir", str(tmp_path)])

    assert result == 1
    assert "refusing to start" in capsys.readouterr().err


def test_play_launcher_honors_headless_env_flag(tmp_path: Path, monkeypatch) -> None:
    captured = {}

    def fake_run(config, **kwargs):
        captured.update(kwargs)
        return 0

    monkeypatch.setattr("tokengrid.cli.play.run_pygame_viewer", fake_run)
    monkeypatch.setenv("TOKENGRID_HEADLESS", "1")

    result = main(["--save-dir", str(tmp_path)])

    assert result == 0
    assert captured["headless"] is True
