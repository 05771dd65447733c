"""Closed numeric interval parsed from a sub-delimited field."""

import re
from dataclasses import dataclass

from recdist.errors import ParseError

__all__ = ["DoubleRange", "parse_float"]


def parse_float(value: str, ordinal: int | None = None) -> float:
    """Parse a real value, raising ParseError with field context on failure."""
    try:
        return float(value)
    except ValueError:
        raise ParseError("Field is not a valid number", ordinal=ordinal, value=value) from None


@dataclass(frozen=True, slots=True)
class DoubleRange:
    """Immutable ``[lower, upper]`` interval.

    Attributes
    ----------
    lower : float
        Lower bound (inclusive).
    upper : float
        Upper bound (inclusive).
    """

    lower: float
    upper: float

    def contains(self, value: float) -> bool:
        """Return True if ``value`` lies within the bounds, inclusive."""
        return self.lower <= value <= self.upper

    @classmethod
    def parse(
        cls,
        field: str,
        delimiter: re.Pattern[str],
        ordinal: int | None = None,
    ) -> "DoubleRange | None":
        """Parse ``lower<delim>upper`` into a range.

        Parameters
        ----------
        field : str
            Raw field value.
        delimiter : re.Pattern[str]
            Compiled sub-field delimiter.
        ordinal : int | None, optional
            Attribute ordinal, for error context.

        Returns
        -------
        DoubleRange | None
            Parsed range, or None if the field holds a single value.

        Raises
        ------
        ParseError
            If the field has more than two sub-fields or non-numeric bounds.
        """
        items = delimiter.split(field)
        if len(items) == 1:
            return None
        if len(items) != 2:
            raise ParseError("Too many sub fields for a range", ordinal=ordinal, value=field)
        return cls(lower=parse_float(items[0], ordinal), upper=parse_float(items[1], ordinal))
