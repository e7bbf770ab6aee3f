"""Stop departure board for Transit-served stops."""

__version__ = "0.1.0"
