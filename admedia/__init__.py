"""
AdMedia: advertising campaign management backend.
"""

__version__ = "1.0.0"
