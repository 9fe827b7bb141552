class TodoError(Exception):
    """Base exception for all todotm errors."""
    pass

class RecoverableError(TodoError):
    """An error that can be reported without data loss."""
    pass

class FatalError(TodoError):
    """An error that requires application termination or manual intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in the save file, to just unknown data"""
    pass

class FileOperationError(RecoverableError):
    """File operation failed; data on disk may need checking."""
    pass

class CreateDirError(FileOperationError):
    """The directory holding the save file could not be created."""
    pass

class BackupMissingError(RecoverableError):
    """Undo was requested but no backup generation exists."""

    def __init__(self, message: str = "no backup available"):
        super().__init__(message)

class ArgumentError(RecoverableError):
    """A command received arguments it cannot work with."""
    pass

class ArgMissingError(ArgumentError):
    def __init__(self, what: str):
        self.what = what
        super().__init__(f"argument missing: {what}")

class TooManyArgsError(ArgumentError):
    def __init__(self, extra: str):
        self.extra = extra
        super().__init__(f"too many arguments: {extra}")

class InvalidTaskIdError(ArgumentError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"invalid task id: {token}")

class TaskNotFoundError(ArgumentError):
    def __init__(self, message: str = "task not found"):
        super().__init__(message)

class InvalidDateFormatError(ArgumentError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"invalid date format: {token} (expected YYYY-MM-DD)")

class InvalidColorError(ArgumentError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"invalid color: {token}")

class UnknownCommandError(ArgumentError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown command: {name}")
