"""
polybar-manager

Restarts polybar themes on X11: resolves monitor roles from the RandR
topology, detects the theme's bars and supervises one polybar per bar.
"""

__version__ = "1.0.0"
__author__ = "polybar-manager contributors"
