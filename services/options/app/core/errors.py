"""Domain errors raised by the option service and mapped to HTTP in main.py."""


class OptionError(Exception):
    """Base class for option errors; carries a client-safe message."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OptionAlreadyExistsError(OptionError):
    """A create or rename would give two active options the same name."""

    status_code = 409


class OptionNotFoundError(OptionError):
    """No active option matches the requested id."""

    status_code = 404


class UnknownOptionKindError(OptionError):
    """The requested option kind is not in the catalogue."""

    status_code = 404


class InvalidOptionRequestError(OptionError):
    """A request is well-formed but cannot be processed (e.g. empty batch)."""

    status_code = 400
