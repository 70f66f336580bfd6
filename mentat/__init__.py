"""mentat - plugin-driven chat command bot with an HTTP admin surface."""

__version__ = "1.0.0"
