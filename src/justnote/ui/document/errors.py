from __future__ import annotations


class DocumentError(Exception):
    """Base class for recoverable document/session failures."""


class FileError(DocumentError):
    def __init__(self, path: str | None, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message


class FileUnreadableError(FileError):
    pass


class FileUnwritableError(FileError):
    pass


class NoAssociatedFileError(FileError):
    def __init__(self) -> None:
        super().__init__(None, "The document has no associated file.")


class NoActiveTabError(DocumentError):
    pass


class SessionCorruptError(DocumentError):
    pass
