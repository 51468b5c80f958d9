"""Error types raised while extracting, synthesizing and packaging value classes."""


class MavirError(Exception):
    """Base class for all errors surfaced to the CLI."""


class ParseError(MavirError):
    """A single source file could not be turned into a compilation unit."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class CannotReadFileError(ParseError):
    pass


class FileNotParsableAsJavaError(ParseError):
    pass


class FileProcessingError(ParseError):
    pass


class GenerateError(MavirError):
    """Packaging the synthesized sources failed."""


class InvalidOutputPathError(GenerateError, ValueError):
    pass


class StagingIOError(GenerateError):
    pass


class ArchiveError(GenerateError):
    pass


class DuplicateClassError(GenerateError):
    pass
