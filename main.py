"""Serve the Site Replica API: ``uvicorn main:app`` or ``python main.py``."""

from __future__ import annotations

import os
import sys
from pathlib import Path

SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sitereplica.api.app import app  # noqa: E402

__all__ = ("app",)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.environ.get("REPLICA_HOST", "127.0.0.1"), port=int(os.environ.get("REPLICA_PORT", "8000")))
