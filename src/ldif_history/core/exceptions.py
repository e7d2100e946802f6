"""
Custom exceptions for ldif-history.
"""


class BackupError(Exception):
    """Base exception for all backup pipeline errors."""
    pass


class ExportCommandError(BackupError):
    """
    The export-producing command failed.
    
    Raised when:
    - The command cannot be started
    - The command exits with a non-zero status
    """
    
    def __init__(self, message: str, command: str = None, returncode: int = None, stderr: str = None):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class QuiescenceError(BackupError):
    """
    Successive exports never agreed on their entry count.
    
    Raised after the configured number of read attempts when the directory
    kept changing between reads.
    """
    
    def __init__(self, message: str, counts: list = None):
        super().__init__(message)
        self.counts = counts or []


class SnapshotWriteError(BackupError):
    """
    An entry file could not be written into the snapshot directory.
    
    Files written before the failure are left on disk.
    """
    
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class VersionControlError(BackupError):
    """A git operation on the snapshot repository failed."""
    
    def __init__(self, message: str, git_args: list = None, stderr: str = None):
        super().__init__(message)
        self.git_args = git_args or []
        self.stderr = stderr


class ConfigError(BackupError):
    """
    Error in backup configuration.
    
    Raised when:
    - Configuration file is missing or invalid
    - Configuration values are out of valid range
    """
    pass
