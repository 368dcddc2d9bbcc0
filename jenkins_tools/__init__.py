"""Jenkins Tools - Python library for installing and configuring a local Jenkins."""

__version__ = "0.1.0"

from . import config, directories, groovy, health, packages, plugins, provision, script_console, security, service, utils

__all__ = [
    "config",
    "directories",
    "groovy",
    "health",
    "packages",
    "plugins",
    "provision",
    "script_console",
    "security",
    "service",
    "utils",
]
