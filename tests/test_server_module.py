import logging

import pytest

from labyrinth import __version__, create_app
from labyrinth.server import configure_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_configure_logging_writes_rotating_file(tmp_path, restore_root_logging):
    path = configure_logging(str(tmp_path / "logs"))
    logging.getLogger("labyrinth.test").info("hello from test")
    for h in restore_root_logging.handlers:
        h.flush()
    with open(path, encoding="utf-8") as fh:
        assert "hello from test" in fh.read()


def test_configure_logging_is_idempotent(tmp_path, restore_root_logging):
    configure_logging(str(tmp_path))
    configure_logging(str(tmp_path))
    assert len(restore_root_logging.handlers) == 2


def test_create_app_registers_blueprint_and_overrides():
    app = create_app({"MAZE_MAX_SIZE": 50})
    assert "maze" in app.blueprints
    assert app.config["MAZE_MAX_SIZE"] == 50
    assert isinstance(__version__, str)


def test_module_headers_carry_license():
    import labyrinth
    import labyrinth.routes.maze_api
    import labyrinth.server

    for mod in (labyrinth, labyrinth.server, labyrinth.routes.maze_api):
        assert "License: MIT" in mod.__doc__
