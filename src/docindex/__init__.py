"""
docindex - incremental semantic indexing and search for documentation trees.
"""

__version__ = "0.1.0"
