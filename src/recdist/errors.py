"""Exception types raised by the distance engine."""

__all__ = ["RecordDistanceError", "ParseError", "ConfigurationError"]


class RecordDistanceError(Exception):
    """Base class for record distance failures.

    Attributes
    ----------
    ordinal : int | None
        Attribute ordinal being evaluated when the error occurred.
    value : str | None
        Raw field value involved, if any.
    """

    def __init__(
        self,
        message: str,
        ordinal: int | None = None,
        value: str | None = None,
    ) -> None:
        """Initialize error with diagnostic context.

        Parameters
        ----------
        message : str
            Error message.
        ordinal : int | None, optional
            Attribute ordinal, by default None.
        value : str | None, optional
            Raw field value, by default None.
        """
        if ordinal is not None:
            message = f"{message} (ordinal={ordinal}"
            message += f", value={value!r})" if value is not None else ")"
        super().__init__(message)
        self.ordinal = ordinal
        self.value = value


class ParseError(RecordDistanceError):
    """Raised when a field cannot be parsed as its declared type."""


class ConfigurationError(RecordDistanceError):
    """Raised when schema and distance configuration are inconsistent."""
