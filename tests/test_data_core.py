"""Unit tests for PersistenceEngine."""

import json
import pytest
import tempfile
from datetime import date
from pathlib import Path
from unittest.mock import patch

from todotm.data import PersistenceEngine, default_data_dir
from todotm.models import Color, Task, TaskCollection
from todotm.recovery import (
    BackupMissingError, CorruptionError, CreateDirError, FileOperationError
)


def state(*names):
    return TaskCollection(root=[Task(name=name) for name in names])


class TestLoadSave:
    """Test loading and saving the task file."""

    def test_load_missing_file(self):
        """Test a missing file loads as an empty collection."""
        with tempfile.TemporaryDirectory() as temp_dir:
            collection = PersistenceEngine().load(Path(temp_dir) / "tasks.json")
            assert len(collection) == 0

    def test_round_trip(self, tmp_path):
        """Test every field survives save and load, including optionals."""
        path = tmp_path / "tasks.json"
        collection = TaskCollection(root=[
            Task(name="plain"),
            Task(name="full", creation_date=date(2024, 3, 1), due_date=date(2024, 4, 1),
                 color=Color.PURPLE, note="line one\nline two"),
            Task(name="colored only", color=Color.RED),
        ])
        engine = PersistenceEngine()
        engine.save(path, collection)
        assert engine.load(path) == collection

    def test_encoded_records(self, tmp_path):
        """Test the file is a JSON array with stable field names."""
        path = tmp_path / "tasks.json"
        collection = TaskCollection(root=[
            Task(name="a", creation_date=date(2024, 3, 1), due_date=date(2024, 4, 1), color=Color.BLUE),
            Task(name="b", creation_date=date(2024, 3, 2)),
        ])
        PersistenceEngine().save(path, collection)
        records = json.loads(path.read_text(encoding="utf-8"))
        assert records == [
            {"name": "a", "creation_date": "2024-03-01", "due_date": "2024-04-01", "color": "Blue", "note": ""},
            {"name": "b", "creation_date": "2024-03-02", "due_date": None, "color": None, "note": ""},
        ]

    def test_creates_parent_directory(self, tmp_path):
        """Test save creates missing directories."""
        path = tmp_path / "nested" / "deeper" / "tasks.json"
        PersistenceEngine().save(path, state("a"))
        assert path.exists()

    def test_first_save_without_backups(self, tmp_path):
        """Test the first save does not need backups to exist."""
        path = tmp_path / "tasks.json"
        PersistenceEngine().save(path, state("a"))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["tasks.json"]

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes leave no temporary files behind."""
        path = tmp_path / "tasks.json"
        engine = PersistenceEngine()
        engine.save(path, state("a"))
        engine.save(path, state("a", "b"))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["tasks.000", "tasks.json"]

    @pytest.mark.parametrize("content", [
        "not json", "{}", "", '[{"name": 1}]', '[{"name": "a", "creation_date": "soon"}]',
        '[{"name": "x"}]',
        '[{"name": "x", "creation_date": "2024-01-01"}]',
        '[{"name": "x", "creation_date": 0, "note": ""}]',
        '[{"name": "x", "creation_date": "2024-01-01", "note": "", "color": "red"}]',
    ])
    def test_corrupt_file(self, tmp_path, content):
        """Test undecodable files are fatal."""
        path = tmp_path / "tasks.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(CorruptionError):
            PersistenceEngine().load(path)

    def test_optional_fields_may_be_absent(self, tmp_path):
        """Test records without due_date or color still load."""
        path = tmp_path / "tasks.json"
        path.write_text('[{"name": "x", "creation_date": "2024-01-01", "note": ""}]', encoding="utf-8")
        task = PersistenceEngine().load(path)[0]
        assert task.creation_date == date(2024, 1, 1)
        assert task.due_date is None
        assert task.color is None

    def test_binary_file(self, tmp_path):
        """Test a non-text file is reported as corrupt."""
        path = tmp_path / "tasks.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(CorruptionError):
            PersistenceEngine().load(path)

    def test_directory_creation_failure(self, tmp_path):
        """Test a failing mkdir aborts the save."""
        path = tmp_path / "missing" / "tasks.json"
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            with pytest.raises(CreateDirError):
                PersistenceEngine().save(path, state("a"))
        assert not path.exists()

    def test_write_failure_keeps_backup(self, tmp_path):
        """Test a failed write is surfaced after the rotation already happened."""
        path = tmp_path / "tasks.json"
        engine = PersistenceEngine()
        engine.save(path, state("a"))
        with patch("todotm.data.io.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError, match="disk full"):
                engine.save(path, state("a", "b"))
        assert not path.exists()
        assert (tmp_path / "tasks.000").exists()
        assert [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")] == []


class TestRollback:
    """Test multi-generation undo."""

    def test_three_saves(self, tmp_path):
        """Test S1, S2, S3 then rollback gives S2, then S1, then an error."""
        path = tmp_path / "tasks.json"
        engine = PersistenceEngine()
        s1, s2, s3 = state("one"), state("one", "two"), state("one", "two", "three")
        for collection in (s1, s2, s3):
            engine.save(path, collection)

        engine.rollback(path)
        assert engine.load(path) == s2
        engine.rollback(path)
        assert engine.load(path) == s1
        with pytest.raises(BackupMissingError):
            engine.rollback(path)
        assert engine.load(path) == s1

    def test_rollback_on_fresh_path(self, tmp_path):
        """Test undo with no history fails and creates nothing."""
        path = tmp_path / "tasks.json"
        with pytest.raises(BackupMissingError):
            PersistenceEngine().rollback(path)
        assert not path.exists()

    def test_eleven_steps_back(self, tmp_path):
        """Test up to eleven saved states can be walked back."""
        path = tmp_path / "tasks.json"
        engine = PersistenceEngine()
        states = [state(*[f"t{i}" for i in range(n + 1)]) for n in range(13)]
        for collection in states:
            engine.save(path, collection)

        for expected in reversed(states[1:12]):
            engine.rollback(path)
            assert engine.load(path) == expected
        with pytest.raises(BackupMissingError):
            engine.rollback(path)

    def test_configured_generations(self, tmp_path):
        """Test a smaller backup chain."""
        path = tmp_path / "tasks.json"
        engine = PersistenceEngine(max_generation=1)
        for n in range(4):
            engine.save(path, state(*["x"] * (n + 1)))
        assert {p.name for p in tmp_path.iterdir()} == {"tasks.json", "tasks.000", "tasks.001"}


class TestDataDir:
    """Test data directory resolution."""

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TODOTM_DATA_DIR", str(tmp_path))
        assert default_data_dir() == tmp_path
        assert PersistenceEngine.default_path() == tmp_path / "tasks.json"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("TODOTM_DATA_DIR", raising=False)
        assert default_data_dir() == PersistenceEngine.USER_DATA_DIR
