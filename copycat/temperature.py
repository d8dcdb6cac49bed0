# Folder: copycat/
# File: temperature.py
import math
import logging

logger = logging.getLogger(__name__)

INITIAL_VALUE = 100.0
DEFAULT_CLAMP_TIME = 30


class Temperature:
    """
    Global measure of the workspace's disorder, in [0, 100].
    High temperature flattens probabilistic choices; low temperature sharpens them.
    The value is held at 100 while clamped.
    """

    def __init__(self, initial_clamp_time: int = DEFAULT_CLAMP_TIME):
        self.initial_clamp_time = initial_clamp_time
        self.reset()

    def reset(self):
        """Sets the temperature to 100 and clamps it until the initial clamp time."""
        self.actual_value = INITIAL_VALUE
        self.last_unclamped_value = INITIAL_VALUE
        self.clamped = True
        self.clamp_time = self.initial_clamp_time

    def value(self) -> float:
        return INITIAL_VALUE if self.clamped else self.actual_value

    def set(self, value: float):
        """Records value; while clamped the effective value stays at 100."""
        self.last_unclamped_value = value
        self.actual_value = INITIAL_VALUE if self.clamped else value

    def clamp_until(self, when: int):
        self.clamped = True
        self.clamp_time = when
        logger.debug(f"Temperature clamped until tick {when}")

    def try_unclamp(self, current_time: int):
        if self.clamped and current_time >= self.clamp_time:
            self.clamped = False
            logger.debug(f"Temperature unclamped at tick {current_time}")

    def get_adjusted_value(self, value: float) -> float:
        """Raises value to a power that grows as the temperature drops."""
        exponent = (100 - self.value()) / 30 + 0.5
        return value ** exponent

    def get_adjusted_prob(self, prob: float) -> float:
        """
        Pulls a probability toward 0.5 as the temperature rises.
        Args:
            prob (float): Probability in [0, 1].
        Returns:
            float: The adjusted probability. 0 and 0.5 are fixed points.
        """
        if prob == 0:
            return 0.0
        if prob == 0.5:
            return 0.5
        if prob < 0.5:
            return 1 - self.get_adjusted_prob(1 - prob)
        temp = self.value()
        return max(0.5, prob * (1 - (10 - math.sqrt(100 - temp)) / 100))
