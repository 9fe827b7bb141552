"""
todotm - a local, file-backed task tracker.

Tasks live in a single JSON file; every save keeps numbered backup
generations so changes can be undone.
"""

from .version import VERSION, AUTHORS
from .models import (
    Color,
    Task,
    TaskCollection,
    TaskRow,
    TaskView
)
from .data import PersistenceEngine, BackupManager

__version__ = VERSION
__author__ = AUTHORS

__all__ = [
    "VERSION",
    "Color",
    "Task",
    "TaskCollection",
    "TaskRow",
    "TaskView",
    "PersistenceEngine",
    "BackupManager"
]
