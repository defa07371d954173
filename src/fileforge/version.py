"""Version information for fileforge.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from importlib import metadata

__version__ = "1.0.0"


def get_version() -> str:
    """Get the current version of fileforge."""
    try:
        return metadata.version("fileforge")
    except metadata.PackageNotFoundError:
        # Running from a source checkout
        return __version__
