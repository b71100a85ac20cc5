"""
Host diagnostics and a quick, single-sample network characterization.
"""

__all__ = ["system_state", "network", "cli"]
__version__ = "0.1.0"
