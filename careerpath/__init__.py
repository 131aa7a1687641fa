"""CareerPath: AI career consultant."""

__version__ = "0.1.0"
