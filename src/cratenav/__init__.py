"""
Cratenav: locate the children modules of the module under the cursor.
"""

__version__ = "0.1.0"
