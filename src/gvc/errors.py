"""Exception hierarchy for gvc.

Validation problems abort before anything is written; catalog problems mean
the document cannot be safely read or edited; cancellation unwinds the whole
run. Transient repository failures are not represented here at all: the
resolvers swallow them and report "no versions".
"""


class GvcError(Exception):
    """Base class for all gvc errors."""


class ValidationError(GvcError):
    """Malformed input: coordinate, pattern, configuration or project layout."""


class ProjectValidationError(ValidationError):
    """The project directory does not look like a Gradle version-catalog project."""


class InvalidPatternError(ValidationError):
    """A targeted-update filter pattern is empty or cannot be compiled."""


class InsecureRepositoryError(ValidationError):
    """A repository URL uses a forbidden scheme or targets a private host."""


class ConfigError(ValidationError):
    """The configuration file is missing, unreadable or has the wrong shape."""


class CatalogError(GvcError):
    """The catalog document cannot be read, parsed or written."""


class UnsupportedShapeError(CatalogError):
    """A catalog entry has a shape that cannot be edited safely."""

    def __init__(self, name: str, detail: str = ""):
        self.name = name
        message = f"Unsupported entry shape for '{name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UserCancelledError(GvcError):
    """The user asked to stop the update process."""

    def __init__(self, message: str = "Operation cancelled by user"):
        super().__init__(message)
