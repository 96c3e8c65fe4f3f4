class StorageError(Exception):
    """Exception raised when a persistent store backend cannot read or write a value."""
    pass


class InvalidAlarmTimeError(ValueError):
    """Exception raised when an alarm time is not a valid 24h "HH:MM" string."""
    pass
