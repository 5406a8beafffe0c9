"""Taskmaster: local task list + user preferences."""

__version__ = "0.1.0"
