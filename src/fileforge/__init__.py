"""fileforge: client for long-running remote file transformations.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from .version import __version__

__all__ = ['__version__']
