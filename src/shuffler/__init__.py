"""
Shuffler package.

Rotates play among a pool of ROMs on a randomised schedule.

Design goals:
- reproducible runs (seed chain persisted across restarts)
- plain-text persistence that survives a crash mid-swap
- host emulator kept behind a small collaborator interface
"""

__version__ = "0.1.0"
