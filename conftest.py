"""Root conftest: pins pos_sync settings to .env.test before any module imports."""
from __future__ import annotations

import os
from pathlib import Path

# tests never reach a real broker
os.environ.pop("REDIS_URL", None)

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for line in _env_test.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        # override, so a developer shell cannot aim tests at a live gateway
        os.environ[key.strip()] = value.strip()
