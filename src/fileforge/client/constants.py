"""Client configuration constants.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from pathlib import Path

from fileforge.jobs.operations import PROGRESS_ENDPOINT

CONFIG_FILE = Path.home() / ".fileforge_config.json"
DEFAULT_OUTPUT_DIR = Path.home() / "Downloads" / "fileforge"

PROGRESS_PATH = PROGRESS_ENDPOINT

DEFAULT_POLL_INTERVAL = 1.0  # seconds between progress requests
DEFAULT_REQUEST_TIMEOUT = 120.0
POLL_MODES = ("fixed", "settled")

# Terminal colors for status labels
STATUS_COLORS = {
    'idle': 'white',
    'validated': 'white',
    'submitting': 'yellow',
    'polling': 'yellow',
    'completed': 'green',
    'failed': 'red',
}
