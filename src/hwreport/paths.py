"""Shared project path helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

PROJECT_ROOT: Final[Path] = (
    Path(os.environ["HWREPORT_HOME"]).expanduser().resolve()
    if "HWREPORT_HOME" in os.environ
    else Path.cwd()
)


def config_file() -> Path:
    return PROJECT_ROOT / "hwreport.yaml"
