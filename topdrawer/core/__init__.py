"""TopDrawer Core - Shared utilities and infrastructure.

Import specific functions from submodules:
    from topdrawer.core.config import ConfigManager
    from topdrawer.core import constants
    from topdrawer.core import logging
    from topdrawer.core import validators
"""

from topdrawer.core import config, constants, logging, validators

__all__ = [
    "config",
    "constants",
    "logging",
    "validators",
]
