"""
project: Labyrinth
module: __init__.py
License: MIT

Flask application factory for the maze level service.

The service is a thin read-only surface over ``labyrinth.maze``: it generates
levels on request and returns them as JSON for the game client's level
builder. Configuration comes from environment variables (optionally via a
``.env`` file) and may be overridden per app through ``app.config``.
"""

import os

from dotenv import load_dotenv
from flask import Flask, jsonify

__version__ = "0.4.0"

# Load .env if present so MAZE_* and LABYRINTH_* settings can be supplied
# without exporting shell variables during development.
load_dotenv()


def create_app(config_overrides: dict | None = None) -> Flask:
    """Build a new Flask app with the maze blueprint registered."""
    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only installs still serve mazes; only file logging needs it
        pass

    app.config.update(
        MAZE_CACHE_SIZE=int(os.getenv("MAZE_CACHE_SIZE", "8")),
        MAZE_MAX_SIZE=int(os.getenv("MAZE_MAX_SIZE", "120")),
    )
    if config_overrides:
        app.config.update(config_overrides)

    from labyrinth.routes.maze_api import bp_maze

    app.register_blueprint(bp_maze)

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"error": "not found"}), 404

    return app


__all__ = ["create_app", "__version__"]
