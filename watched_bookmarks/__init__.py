"""Browse a Chrome bookmark folder by the day each bookmark was added."""

__version__ = "0.1.0"
