from techwriter.backup.manager import BackupManager, ImportResult, ImportValidation

__all__ = ["BackupManager", "ImportResult", "ImportValidation"]
