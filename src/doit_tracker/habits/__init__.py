"""
Habit (protocol) subsystem.

Components:
- habit_models.py: Habit + completion toggling
- habit_store.py: in-memory habits per cadence with optimistic mutators
- progress.py: streaks, per-column progress and grid helpers (pure)
"""
