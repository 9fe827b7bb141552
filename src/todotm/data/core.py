"""
PersistenceEngine - load, save and roll back the task file.

The whole task collection is one JSON document. Saving rotates the backup
generations first so every save can be undone.
"""
import os
from pathlib import Path
from typing import Union
from pydantic import ValidationError
from todotm.recovery import CorruptionError
from todotm.models import TaskCollection, STORED
from todotm.logs import get_logger
from .io import atomic_write, create_dirs, encode_json, read_text
from .backup import BackupManager, MAX_GENERATION

log = get_logger("data")

def default_data_dir() -> Path:
    """The data directory, honouring TODOTM_DATA_DIR."""
    override = os.getenv("TODOTM_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return PersistenceEngine.USER_DATA_DIR

class PersistenceEngine:
    USER_DATA_DIR = Path.home() / ".local" / "share" / "todotm"
    TASKS_FILE = "tasks.json"

    def __init__(self, max_generation: int = MAX_GENERATION):
        self.max_generation = max_generation

    @classmethod
    def default_path(cls) -> Path:
        return default_data_dir() / cls.TASKS_FILE

    def backups(self, path: Union[Path, str]) -> BackupManager:
        return BackupManager(Path(path), self.max_generation)

    def load(self, path: Union[Path, str]) -> TaskCollection:
        """Load the collection, or an empty one when nothing was saved yet."""
        path = Path(path)
        text = read_text(path)
        if text is None:
            log.info(f"No tasks file at {path}; starting with an empty list")
            return TaskCollection()

        try:
            collection = TaskCollection.model_validate_json(text, strict=True, context=STORED)
        except ValidationError as e:
            error_msg = f"Unable to decode tasks file {path}: {e}"
            log.critical(error_msg)
            raise CorruptionError(error_msg) from e

        log.debug(f"Loaded {len(collection)} task(s) from {path}")
        return collection

    def save(self, path: Union[Path, str], collection: TaskCollection):
        """Encode, rotate backups, then atomically write the new primary file."""
        path = Path(path)
        text = encode_json(collection.model_dump(mode="json"))
        create_dirs(path)
        self.backups(path).rotate()
        atomic_write(path, text)
        log.info(f"Saved {len(collection)} task(s) to {path}")

    def rollback(self, path: Union[Path, str]):
        """Restore the newest backup generation over the primary file."""
        self.backups(path).roll_back()
