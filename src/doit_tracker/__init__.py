"""doit-tracker: habit protocol grid + task board core (stores, streaks, sync)."""

__version__ = "0.1.0"
