"""Transport and configuration for the remote processing service.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from .config_manager import ConfigManager, get_config_manager
from .remote_client import RemoteClient

__all__ = ['ConfigManager', 'RemoteClient', 'get_config_manager']
