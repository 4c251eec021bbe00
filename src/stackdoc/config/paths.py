"""Location of the stackdoc home directory."""

from __future__ import annotations

import os
from pathlib import Path

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".stackdoc"

# Environment variable to override home directory
STACKDOC_HOME_ENV = "STACKDOC_HOME"


def get_stackdoc_home() -> Path:
    """Get the stackdoc home directory path.

    Resolution order:
    1. STACKDOC_HOME environment variable (if set)
    2. ~/.stackdoc (default)

    Returns:
        Path to the stackdoc home directory.
    """
    env_home = os.environ.get(STACKDOC_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME
