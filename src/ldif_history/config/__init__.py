"""
Configuration module for ldif-history.
"""

from .config_loader import BackupConfig

__all__ = ["BackupConfig"]
