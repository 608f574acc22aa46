"""Exceptions raised outside the pure expansion core."""


class EnumRawValuesError(Exception):
    """Base class for errors raised by enum-raw-values tooling."""


class SourceParseError(EnumRawValuesError):
    """The module could not be parsed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"{path}: {detail}")
        self.path = path
        self.detail = detail


class ChangeApplicationError(EnumRawValuesError):
    """A set of changes could not be applied to a source text."""


class OverlappingChangesError(ChangeApplicationError):
    pass


class StaleChangeError(ChangeApplicationError):
    """The text under a change no longer matches what the change was built from."""


class InvalidEditError(ChangeApplicationError):
    """The edited source is no longer valid Python."""
