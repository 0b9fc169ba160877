"""
Validation functions for attrs.
"""

from attrs import define
from attrs.validators import in_

__all__ = ["in_", "range_", "positive"]


@define(repr=False, frozen=True)
class _RangeValidator:
    minimum: float
    maximum: float

    def __call__(self, inst, attr, value):
        try:
            in_range = self.minimum <= value <= self.maximum
        except TypeError:
            in_range = False

        if not in_range:
            raise ValueError(
                "'{name}' must be in range [{minimum!r}, {maximum!r}], got {value!r}".format(
                    name=attr.name,
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self):
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


def range_(minimum, maximum):
    """
    A validator that raises a :exc:`ValueError` if the initializer is called
    with a value that does not belong in the [minimum, maximum] range. The
    check is performed using ``minimum <= value <= maximum``
    """
    return _RangeValidator(minimum, maximum)


def positive(inst, attr, value):
    """A validator that raises a :exc:`ValueError` unless ``value > 0``."""
    try:
        ok = value > 0
    except TypeError:
        ok = False
    if not ok:
        raise ValueError("'%s' must be positive, got %r" % (attr.name, value))
