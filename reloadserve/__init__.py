"""
reloadserve - local development file server with live reload.
"""

__version__ = "0.1.0"
