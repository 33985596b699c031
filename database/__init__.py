"""
Database Package - MongoDB connection handling
"""

from .mongodb import MongoDB

__all__ = ["MongoDB"]
