"""
Data management submodule: task file persistence and backup generations.
"""

from .core import PersistenceEngine, default_data_dir
from .backup import BackupManager, plan_rotation, plan_rollback

__all__ = [
    'PersistenceEngine',
    'BackupManager',
    'default_data_dir',
    'plan_rotation',
    'plan_rollback'
]
