"""Ideas Central - problem, idea and evaluation workflow for campus innovation."""

__version__ = "1.0.0"
