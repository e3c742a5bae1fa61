"""ACWhisk social and messaging backend."""

__version__ = "1.0.0"
