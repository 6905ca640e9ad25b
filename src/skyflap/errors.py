"""Exceptions raised by SKYFLAP."""


class SkyflapError(Exception):
    """Base class for all SKYFLAP errors."""


class ResourceLoadError(SkyflapError):
    """A manifest entry could not be loaded.

    Loading is attempted once; this error aborts startup.
    """

    def __init__(self, name: str, src: str, cause: BaseException | None = None):
        self.name = name
        self.src = src
        self.cause = cause
        message = f"Failed to load resource '{name}' from {src}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ResourceNotFoundError(SkyflapError, KeyError):
    """Requested resource was never loaded or registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Resource not loaded: {self.name}"
