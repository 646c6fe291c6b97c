"""
desksetup - Desktop provisioning for Arch and Fedora based systems
"""

__version__ = "10.0.0"

from .core import DesktopSetup, SetupError

__all__ = ["DesktopSetup", "SetupError"]
