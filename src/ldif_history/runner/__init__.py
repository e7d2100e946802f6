"""
Runner module for orchestrating the backup pipeline.
"""

from .backup_runner import BackupRunner, RunSettings, RunReport

__all__ = ["BackupRunner", "RunSettings", "RunReport"]
