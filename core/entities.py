from __future__ import annotations

import math
from enum import Enum
from typing import Callable, ClassVar, Dict, Optional, Tuple


class ValidationError(ValueError):
    """Raised when a value object rejects its input.

    ``reason`` is a short, stable token (``"invalid length"``, ``"infinite"``...)
    while the message is meant for logs.
    """

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


def almost_equal(a: float, b: float, epsilon: float) -> bool:
    return abs(a - b) <= epsilon


def round1(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    scaled = value * 10
    if not math.isfinite(scaled):
        return value
    whole = math.floor(abs(scaled))
    if abs(scaled) - whole >= 0.5:
        whole += 1
    return math.copysign(whole, scaled) / 10


# Postal code ------------------------------------------------------------
_POSTAL_CODE_LENGTH = 8
_REPEATED_DIGITS = frozenset(str(digit) * _POSTAL_CODE_LENGTH for digit in range(10))


class PostalCode:
    """Brazilian postal code (CEP): exactly eight ASCII digits."""

    __slots__ = ("_code",)

    def __init__(self, raw: str) -> None:
        code = (raw or "").strip()
        if not code:
            raise ValidationError("empty", "zip code: empty")
        if len(code) != _POSTAL_CODE_LENGTH:
            raise ValidationError("invalid length", "zip code: invalid length")
        if not (code.isascii() and code.isdigit()):
            raise ValidationError(
                "invalid characters", "zip code: invalid characters - only digits allowed"
            )
        if code in _REPEATED_DIGITS:
            raise ValidationError("equal digits not allowed", "zip code: eight equal digits not allowed")
        object.__setattr__(self, "_code", code)

    @classmethod
    def empty(cls) -> "PostalCode":
        instance = object.__new__(cls)
        object.__setattr__(instance, "_code", "")
        return instance

    @property
    def is_empty(self) -> bool:
        return self._code == ""

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PostalCode):
            return NotImplemented
        if self.is_empty or other.is_empty:
            return False
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    def __str__(self) -> str:
        return self._code

    def __repr__(self) -> str:
        return f"PostalCode({self._code!r})"


# Temperatures -----------------------------------------------------------
class Scale(Enum):
    """Temperature scale: (name, absolute zero, unit glyph, floor precision)."""

    CELSIUS = ("celsius", -273.15, "°C", 2)
    FAHRENHEIT = ("fahrenheit", -459.67, "°F", 2)
    KELVIN = ("kelvin", 0.0, "K", 1)

    def __init__(self, label: str, absolute_zero: float, unit: str, precision: int) -> None:
        self.label = label
        self.absolute_zero = absolute_zero
        self.unit = unit
        self.precision = precision


_CELSIUS_ZERO = Scale.CELSIUS.absolute_zero
_KELVIN_OFFSET = 273.15

# (source, target) -> conversion on the raw value. Only Celsius <-> Kelvin
# skips rounding.
_CONVERSIONS: Dict[Tuple[Scale, Scale], Callable[[float], float]] = {
    (Scale.CELSIUS, Scale.FAHRENHEIT): lambda c: round1((9 * c / 5) + 32.0),
    (Scale.CELSIUS, Scale.KELVIN): lambda c: c - _CELSIUS_ZERO,
    (Scale.FAHRENHEIT, Scale.CELSIUS): lambda f: round1(5.0 * (f - 32) / 9.0),
    (Scale.FAHRENHEIT, Scale.KELVIN): lambda f: round1((5.0 * (f - 32.0) / 9.0) + _KELVIN_OFFSET),
    (Scale.KELVIN, Scale.CELSIUS): lambda k: k - _KELVIN_OFFSET,
    (Scale.KELVIN, Scale.FAHRENHEIT): lambda k: round1((9.0 * (k - _KELVIN_OFFSET) / 5.0) + 32.0),
}


class Temperature:
    """A temperature reading bounded below by its scale's absolute zero.

    Instances built through the constructor are always valid; the only
    invalid instance is the one returned by :meth:`invalid`, which reports
    ``is_valid == False``, converts to NaN, serializes to ``None`` and
    displays as an empty string.
    """

    scale: ClassVar[Scale]

    __slots__ = ("_value", "_valid")

    def __init__(self, value: float) -> None:
        value = float(value)
        if math.isnan(value):
            raise ValidationError("not a number", "temperature: value is NaN")
        if math.isinf(value):
            raise ValidationError("infinite", "temperature: value is infinite")
        floor = self.scale.absolute_zero
        if value < floor:
            raise ValidationError(
                "below absolute zero",
                f"temperature {self.scale.label}: below absolute zero "
                f"({floor:.{self.scale.precision}f} {self.scale.unit})",
            )
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_valid", True)

    @classmethod
    def invalid(cls):
        instance = object.__new__(cls)
        object.__setattr__(instance, "_value", 0.0)
        object.__setattr__(instance, "_valid", False)
        return instance

    @property
    def value(self) -> float:
        return self._value

    @property
    def is_valid(self) -> bool:
        return self._valid

    def convert_to(self, scale: Scale) -> float:
        """Return the raw reading in ``scale``; NaN if this instance is invalid.

        The result is not validated. Wrap it in the target class to get a
        typed temperature.
        """
        if not self._valid:
            return math.nan
        if scale is self.scale:
            return self._value
        return _CONVERSIONS[(self.scale, scale)](self._value)

    def to_celsius(self) -> float:
        return self.convert_to(Scale.CELSIUS)

    def to_fahrenheit(self) -> float:
        return self.convert_to(Scale.FAHRENHEIT)

    def to_kelvin(self) -> float:
        return self.convert_to(Scale.KELVIN)

    def serialize(self) -> Optional[float]:
        if not self._valid:
            return None
        return round1(self._value)

    def display(self) -> str:
        if not self._valid:
            return ""
        return f"{self._value:.1f} {self.scale.unit}".replace(".", ",", 1)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Temperature):
            return NotImplemented
        if other.scale is not self.scale:
            return False
        if not (self._valid and other._valid):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((self.scale, self._value, self._valid))

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        if not self._valid:
            return f"{type(self).__name__}.invalid()"
        return f"{type(self).__name__}({self._value!r})"


class Celsius(Temperature):
    scale = Scale.CELSIUS
    __slots__ = ()


class Fahrenheit(Temperature):
    scale = Scale.FAHRENHEIT
    __slots__ = ()


class Kelvin(Temperature):
    scale = Scale.KELVIN
    __slots__ = ()


__all__ = [
    "Celsius",
    "Fahrenheit",
    "Kelvin",
    "PostalCode",
    "Scale",
    "Temperature",
    "ValidationError",
    "almost_equal",
    "round1",
]
