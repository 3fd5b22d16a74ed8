"""whatsnext - turn project folders into a prioritized task list."""

__version__ = "0.1.0"
