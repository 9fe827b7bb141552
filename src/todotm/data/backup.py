"""
Numbered backup generations kept beside the save file.

Slots are the primary file plus generations 0 (newest) to max_generation
(oldest), named by replacing the primary file's extension with a zero-padded
three digit number: tasks.json, tasks.000, ..., tasks.010.

Rotation and rollback are planned as ordered (source, destination) slot moves
by pure functions, then applied with os.replace. Neither is transactional: a
failure halfway leaves the earlier moves in place.
"""
import os
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, List, Set, Tuple, Iterable
from todotm.recovery import BackupMissingError, FileOperationError
from todotm.logs import get_logger

log = get_logger('data.backup')

PRIMARY = -1
MAX_GENERATION = 10

Move = Tuple[int, int]

def plan_rotation(occupied: Iterable[int], primary_exists: bool,
                  max_generation: int = MAX_GENERATION) -> List[Move]:
    """Moves that make room for a new primary file.

    Oldest first, so every destination is free (or is the evicted oldest
    generation) by the time it is written.
    """
    occupied = set(occupied)
    moves = [(i, i + 1) for i in range(max_generation - 1, -1, -1) if i in occupied]
    if primary_exists:
        moves.append((PRIMARY, 0))
    return moves

def plan_rollback(occupied: Iterable[int], max_generation: int = MAX_GENERATION) -> List[Move]:
    """Moves that restore generation 0 and shift older ones one step newer."""
    occupied = set(occupied)
    if 0 not in occupied:
        raise BackupMissingError()
    moves = [(0, PRIMARY)]
    moves.extend((i, i - 1) for i in range(1, max_generation + 1) if i in occupied)
    return moves

def simulate(moves: List[Move], contents: Dict[int, Any]) -> Dict[int, Any]:
    """Apply a move plan to a slot -> content mapping without touching disk."""
    result = dict(contents)
    for source, destination in moves:
        result[destination] = result.pop(source)
    return result

class BackupManager:
    """Backup generations for one primary file."""

    def __init__(self, primary: Path, max_generation: int = MAX_GENERATION):
        if max_generation < 1:
            raise ValueError("max_generation must be at least 1")
        self.primary = Path(primary)
        self.max_generation = max_generation

    def slot_path(self, slot: int) -> Path:
        if slot == PRIMARY:
            return self.primary
        return self.primary.with_suffix(f".{slot:03d}")

    def occupied(self) -> Set[int]:
        """Generation numbers that currently exist on disk."""
        return {i for i in range(self.max_generation + 1) if self.slot_path(i).exists()}

    def _apply(self, moves: List[Move]):
        for source, destination in moves:
            source_path = self.slot_path(source)
            destination_path = self.slot_path(destination)
            try:
                os.replace(source_path, destination_path)
            except OSError as e:
                error_msg = f"Cannot move {source_path} to {destination_path}: {e}"
                log.error(error_msg)
                raise FileOperationError(error_msg) from e
            log.debug(f"Moved {source_path.name} -> {destination_path.name}")

    def rotate(self) -> List[Move]:
        """Shift every generation one step older and turn the primary into generation 0."""
        occupied = self.occupied()
        moves = plan_rotation(occupied, self.primary.exists(), self.max_generation)
        if {self.max_generation - 1, self.max_generation} <= occupied:
            log.info(f"Evicting oldest backup {self.slot_path(self.max_generation).name}")
        self._apply(moves)
        return moves

    def roll_back(self) -> List[Move]:
        """Restore generation 0 over the primary and shift older generations newer."""
        try:
            moves = plan_rollback(self.occupied(), self.max_generation)
        except BackupMissingError:
            log.warning(f"No backup of {self.primary} to roll back to")
            raise
        self._apply(moves)
        log.info(f"Rolled back {self.primary.name}; {len(moves) - 1} older generation(s) remain")
        return moves

    def list_generations(self) -> List[Dict[str, Any]]:
        """List all existing generations (newest first)"""
        generations = []
        for i in sorted(self.occupied()):
            path = self.slot_path(i)
            try:
                modified_at = datetime.fromtimestamp(path.stat().st_mtime)
            except OSError as e:
                raise FileOperationError(f"Cannot stat backup {path}: {e}") from e
            generations.append({
                "generation": i,
                "path": path,
                "modified_at": modified_at,
            })
        return generations
