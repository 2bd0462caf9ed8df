"""Structured input failures raised by the pricing engine.

Every failure is a rejection of caller input.  The HTTP layer maps ``code``
onto its error payload so the form can show an actionable message.
"""

from __future__ import annotations


class PricingError(ValueError):
    """Base class for rejected pricing input."""

    code = "invalid_request"

    def __init__(self, message: str, value: object = None):
        self.value = value
        super().__init__(message)


class InvalidCapacity(PricingError):
    code = "invalid_capacity"

    def __init__(self, value: object):
        super().__init__(
            f"Capacity must be a positive whole number of TB, got {value!r}",
            value,
        )


class InvalidInstanceCount(PricingError):
    code = "invalid_instance_count"

    def __init__(self, value: object):
        super().__init__(
            f"Instance count must be a whole number of at least 1, got {value!r}",
            value,
        )


class InvalidContractTerm(PricingError):
    code = "invalid_contract_term"

    def __init__(self, value: object, allowed: tuple[int, ...] = ()):
        self.allowed = tuple(allowed)
        options = ", ".join(str(y) for y in self.allowed) or "none"
        super().__init__(
            f"Contract length {value!r} is not offered (choose one of: {options} years)",
            value,
        )


def is_whole_number(value: object) -> bool:
    """True for real ints.  ``bool`` is excluded even though it subclasses int."""
    return isinstance(value, int) and not isinstance(value, bool)
