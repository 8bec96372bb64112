import importlib
import os
import sys

import pytest

# Import run.py as a module and exercise parse_args + main with start_server
# patched so no networking happens.


@pytest.fixture()
def run_module():
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "Labyrinth" in out


def test_default_command_is_server(run_module):
    assert run_module.parse_args([]).command == "server"


def test_server_main_invokes_start_server(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    import labyrinth.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    assert run_module.main(["server"]) == 0
    assert calls == {"host": "127.0.0.1", "port": 5555, "debug": False}


def test_server_flags_override_env(monkeypatch, run_module):
    calls = {}
    import labyrinth.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", lambda host, port, debug: calls.update(port=port, debug=debug))
    monkeypatch.setenv("PORT", "5555")
    run_module.main(["server", "--port", "8081", "--debug"])
    assert calls == {"port": 8081, "debug": True}


def test_render_prints_grid(run_module, capsys):
    code = run_module.main(["render", "--mode", "backtrack", "--width", "11", "--height", "9", "--seed", "3", "--no-color"])
    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    grid_lines = [ln for ln in lines if ln and set(ln) <= set("#.SEC")]
    assert len(grid_lines) == 9
    assert all(len(ln) == 11 for ln in grid_lines)
    assert any(ln.startswith("exit: ") for ln in lines)


def test_render_with_collectibles_and_metrics(run_module, capsys):
    run_module.main(["render", "--width", "31", "--height", "31", "--collectibles", "4", "--seed", "8", "--metrics"])
    out = capsys.readouterr().out
    assert "collectibles_placed: " in out
    assert "phase_ms: " in out


def test_level_command(run_module, capsys):
    assert run_module.main(["level", "0", "--seed", "1", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "Level 1 (18x18, collectibles=4, time=180s)" in out


def test_env_file_argument(monkeypatch, tmp_path, run_module, capsys):
    env_file = tmp_path / ".env"
    env_file.write_text("MAZE_CELL_SIZE=2\n")
    monkeypatch.setenv("MAZE_CELL_SIZE", "unset")
    monkeypatch.delenv("MAZE_CELL_SIZE")
    run_module.main(["--env-file", str(env_file), "render", "--width", "9", "--height", "9", "--seed", "2"])
    exit_line = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("exit: ")][0]
    x, z = (float(v) for v in exit_line.split(": ")[1].split(","))
    # every grid coordinate scaled by 2 is even
    assert x % 2 == 0 and z % 2 == 0
    assert os.environ["MAZE_CELL_SIZE"] == "2"


def test_colorize_adds_ansi_only_when_enabled(run_module):
    rows = ["#S.E#"]
    assert run_module.colorize(rows, False) == rows
    coloured = run_module.colorize(rows, True)[0]
    assert "\x1b[" in coloured
    assert "." in coloured
