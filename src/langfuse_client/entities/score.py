"""Score value typing."""

import math
from enum import Enum
from typing import Union

ScoreValue = Union[bool, int, float, str]


class ScoreDataType(str, Enum):
    """Data type tag sent along with a score value."""

    NUMERIC = "NUMERIC"
    BOOLEAN = "BOOLEAN"
    CATEGORICAL = "CATEGORICAL"


def resolve_score_value(value: ScoreValue) -> tuple[int | float | str, ScoreDataType]:
    """Derive the wire value and data type from a Python score value.

    Booleans are sent as 1/0 since the API has no boolean value type.

    Raises:
        TypeError: If the value is not a bool, number or string
        ValueError: If a numeric value is NaN or infinite
    """
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return (1 if value else 0), ScoreDataType.BOOLEAN
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Score value must be finite, got {value}")
        return value, ScoreDataType.NUMERIC
    if isinstance(value, str):
        return value, ScoreDataType.CATEGORICAL
    raise TypeError(f"Unsupported score value type: {type(value).__name__}")
