from __future__ import annotations

import os
from pathlib import Path

_QUOTE_CHARS = {"'", '"'}
ENV_FILE_VARIABLE = "SKIPTRACE_ENV_FILE"


def _default_env_path() -> Path:
    override = os.getenv(ENV_FILE_VARIABLE)
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[1] / ".env"


def _parse_value(raw_value: str) -> str:
    if len(raw_value) >= 2 and raw_value[0] == raw_value[-1] and raw_value[0] in _QUOTE_CHARS:
        return raw_value[1:-1]
    # Inline comments only count outside quotes.
    if " #" in raw_value:
        raw_value = raw_value.split(" #", 1)[0]
    return raw_value.rstrip()


def load_env_file(path: Path | None = None, *, override: bool = False) -> dict[str, str]:
    """Load ``KEY=value`` lines from a .env file into ``os.environ``.

    Lines may carry an ``export`` prefix. Variables already present in the
    environment win unless ``override`` is set. Returns the assignments that were
    applied; a missing file is not an error.
    """

    env_path = path or _default_env_path()
    try:
        content = env_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}

    applied: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or (not override and key in os.environ):
            continue
        os.environ[key] = applied[key] = _parse_value(value.strip())
    return applied


def env_path(name: str) -> Path | None:
    """Return the path held by environment variable ``name``, if set."""

    value = os.getenv(name, "").strip()
    return Path(value).expanduser() if value else None
