"""Site Replica package: crawl a page, fingerprint its design, generate an original page."""

from __future__ import annotations

import os
from pathlib import Path

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _load_local_env(env_path: Path = ENV_FILE) -> None:
    """Export crawl and model credentials kept in a repository ``.env`` file.

    Lines may carry a leading ``export``; values already set in the process
    environment win.
    """

    if not env_path.is_file():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = (part.strip() for part in line.split("=", 1))
        if not key or key in os.environ:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        os.environ[key] = value


_load_local_env()

from .config import ServiceConfig, load_config  # noqa: E402,F401

__all__ = ["ServiceConfig", "load_config"]
