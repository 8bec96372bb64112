"""
project: Labyrinth
module: server.py
License: MIT

Server bootstrap: logging configuration and the development server runner.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from labyrinth import create_app


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Create the app, configure logging and serve until interrupted."""
    app = create_app()
    configure_logging(app.instance_path)
    try:
        print(f"[INFO] Starting maze service on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def configure_logging(log_dir: str) -> str:
    """Send stdlib logging (Flask/werkzeug) to console and ``<log_dir>/app.log``.

    Safe to call repeatedly: existing root handlers are replaced. Returns the
    log file path.
    """
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "app.log")
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)

    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
