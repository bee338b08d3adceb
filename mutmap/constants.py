"""Constants for mutmap storage strategies."""

DEFAULT_CAPACITY = 16
MIN_CAPACITY = 1
DEFAULT_LOAD_FACTOR = 0.75
GROWTH_FACTOR = 2
