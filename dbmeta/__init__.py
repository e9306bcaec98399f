"""
dbmeta - Database schema metadata toolkit

Reads table, column, primary key and index metadata from a live database
and renders CREATE TABLE statements for MySQL and DM targets.
"""

__version__ = "0.1.0"
__author__ = "dbmeta Team"

from dbmeta.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
