"""
kwallet - Interactive command-line wallet for Kaspa nodes

Dispatches typed commands to the wallet backend and streams node
notifications to the terminal.
"""

from kwallet.version import __version__

__all__ = ["__version__"]
