"""Custom exceptions for ds-adoption."""


class AdoptionError(Exception):
    """Base exception for all adoption-scan errors."""


class RepositoryPathError(AdoptionError):
    """Raised when the repository root is missing or is not a directory."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


class ConfigError(AdoptionError):
    """Raised when a scan configuration file cannot be loaded or validated."""


class SourceParseError(AdoptionError):
    """Raised when a source file does not parse as valid TypeScript."""

    def __init__(self, file_path: str, line: int | None = None):
        self.file_path = file_path
        self.line = line
        where = f" near line {line}" if line is not None else ""
        super().__init__(f"Syntax error in {file_path}{where}")
