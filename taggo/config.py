"""Configuration paths and defaults for taggo."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("TAGGO_HOME", str(Path.home() / ".taggo"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

SUPPORTED_EXTENSIONS = {".go"}

# Version-control metadata is never walked; every other directory is.
SKIP_DIRS = {".git", ".hg", ".svn", ".bzr"}

PROGRAM_NAME = "taggo"
PROGRAM_AUTHOR = "taggo contributors"
PROGRAM_URL = "https://github.com/ArjenL/taggo"
