"""Personal finance calculators served over HTTP."""

__version__ = "0.1.0"
