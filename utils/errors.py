class ReclaimerError(Exception):
    """Base error for scratch-directory maintenance. Never leaves the reclaimer."""

    def __init__(self, message, path, cause=None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self):
        if self.cause is not None:
            return f"{self.message}: {self.path} ({self.cause})"
        return f"{self.message}: {self.path}"


class DirectoryCreationError(ReclaimerError):
    def __init__(self, path, cause=None):
        super().__init__("Cannot create directory", path, cause)


class ListingError(ReclaimerError):
    def __init__(self, path, cause=None):
        super().__init__("Cannot list directory", path, cause)


class EntryAccessError(ReclaimerError):
    def __init__(self, path, cause=None, action="access"):
        super().__init__(f"Cannot {action} entry", path, cause)
        self.action = action
