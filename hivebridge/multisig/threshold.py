"""
Threshold policy: how many distinct committee signatures authorize an action.
"""

from ..constants import INITIAL_THRESHOLD, UINT8_MAX
from ..exceptions import InvalidThreshold


class ThresholdPolicy:
    """
    Positive threshold, never above the signer count.

    Updates to the current value are rejected so callers cannot submit a
    no-op change unknowingly.
    """

    def __init__(self, initial: int = INITIAL_THRESHOLD):
        if not 1 <= initial <= UINT8_MAX:
            raise InvalidThreshold(f"Threshold must be 1-{UINT8_MAX}, got {initial}")
        self._value = initial

    @property
    def value(self) -> int:
        return self._value

    def get(self) -> int:
        return self._value

    def set(self, new_value: int, signer_count: int) -> int:
        """
        Replace the threshold and return the previous value.

        Raises:
            InvalidThreshold: If *new_value* is zero, exceeds *signer_count*,
                exceeds uint8, or equals the current threshold
        """
        if new_value == 0:
            raise InvalidThreshold("Threshold cannot be zero")
        if new_value > signer_count:
            raise InvalidThreshold(
                f"Threshold {new_value} exceeds signer count {signer_count}"
            )
        if new_value > UINT8_MAX:
            raise InvalidThreshold(f"Threshold {new_value} exceeds {UINT8_MAX}")
        if new_value == self._value:
            raise InvalidThreshold(f"Threshold is already {new_value}")

        old, self._value = self._value, new_value
        return old

    def __repr__(self) -> str:
        return f"<ThresholdPolicy {self._value}>"
