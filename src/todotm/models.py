from pydantic import BaseModel, Field, RootModel, ValidationInfo, model_validator
from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Tuple
import re

from .recovery import (
    ArgMissingError,
    InvalidTaskIdError,
    TaskNotFoundError,
    InvalidDateFormatError,
    InvalidColorError,
)

NAME_WIDTH = 75
NOTE_WIDTH = 75
CLEAR_TOKEN = "clear"

# Validation context for records read back from disk
STORED = {"stored": True}
STORED_FIELDS = ("name", "creation_date", "note")

ID_PATTERN = re.compile(r"\+?[0-9]+")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

class Color(Enum):
    """Color tags; declaration order is the sort order."""
    RED = "Red"
    YELLOW = "Yellow"
    GREEN = "Green"
    BLUE = "Blue"
    PURPLE = "Purple"

    @property
    def ordinal(self) -> int:
        return list(Color).index(self)

    @property
    def token(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, token: str) -> Optional['Color']:
        """Parse a color token; "clear" maps to no color."""
        if token == CLEAR_TOKEN:
            return None
        for color in cls:
            if color.token == token:
                return color
        raise InvalidColorError(token)

class Task(BaseModel):
    """A single task."""

    name: str = Field(description="Display name of the task")
    creation_date: date = Field(
        default_factory=date.today,
        frozen=True,
        description="Local date the task was created; never changes"
    )
    due_date: Optional[date] = Field(default=None, description="Optional due date")
    color: Optional[Color] = Field(default=None, description="Optional color tag")
    note: str = Field(default="", description="Free-form note, lines separated by newlines")

    @model_validator(mode="before")
    @classmethod
    def require_stored_fields(cls, data, info: ValidationInfo):
        # Only due_date and color may be absent from a saved record
        if info.context and info.context.get("stored") and isinstance(data, dict):
            missing = [name for name in STORED_FIELDS if name not in data]
            if missing:
                raise ValueError(f"saved task is missing {', '.join(missing)}")
        return data

    @property
    def is_overdue(self) -> bool:
        return self.due_date is not None and self.due_date < date.today()

    def sort_key(self) -> Tuple[bool, int, bool, date]:
        # Absent color / due date must sort after present ones
        return (
            self.color is None,
            self.color.ordinal if self.color is not None else 0,
            self.due_date is None,
            self.due_date if self.due_date is not None else date.min,
        )

class TaskRow(BaseModel):
    """One line of the task table."""
    id: int
    name: str
    creation_date: date
    due_date: Optional[date] = None
    color: Optional[Color] = None
    overdue: bool = False
    has_note: bool = False

class TaskView(BaseModel):
    """Everything known about one task, with the note wrapped for display."""
    id: int
    name: str
    creation_date: date
    due_date: Optional[date] = None
    color: Optional[Color] = None
    overdue: bool = False
    note_lines: List[str] = Field(default_factory=list)

def truncate_name(name: str, width: int = NAME_WIDTH) -> str:
    if len(name) >= width:
        return f"{name[:width - 4]}..."
    return name

def wrap_note(note: str, width: int = NOTE_WIDTH) -> List[str]:
    """Greedy word wrap of each note line on single spaces."""
    lines = []
    for raw_line in note.split("\n"):
        current = ""
        for word in raw_line.split(" "):
            if not current:
                current = word
            elif len(current) + len(word) < width:
                current = f"{current} {word}"
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines

class TaskCollection(RootModel[List[Task]]):
    """Ordered tasks addressed by 1-based position."""

    root: List[Task] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self):
        return iter(self.root)

    def __getitem__(self, index: int) -> Task:
        return self.root[index]

    def resolve_id(self, task_id: Optional[str]) -> int:
        """Validate a 1-based task id token and return the 0-based index."""
        if task_id is None:
            raise ArgMissingError("task id")
        if not ID_PATTERN.fullmatch(task_id):
            raise InvalidTaskIdError(task_id)
        number = int(task_id)
        if number < 1 or number > len(self.root):
            raise TaskNotFoundError()
        return number - 1

    def get(self, task_id: Optional[str]) -> Task:
        return self.root[self.resolve_id(task_id)]

    def create(self, name: str) -> int:
        """Append a new task and return its id."""
        if not name:
            raise ArgMissingError("task name")
        self.root.append(Task(name=name, creation_date=date.today()))
        return len(self.root)

    def rename(self, task_id: Optional[str], new_name: str) -> str:
        """Rename a task and return the old name."""
        task = self.get(task_id)
        old_name = task.name
        task.name = new_name
        return old_name

    def delete(self, task_id: Optional[str]) -> Task:
        """Remove a task; later ids shift down by one."""
        return self.root.pop(self.resolve_id(task_id))

    def set_color(self, task_id: Optional[str], token: Optional[str]) -> Optional[Color]:
        task = self.get(task_id)
        if token is None:
            raise ArgMissingError("color")
        color = Color.parse(token)
        task.color = color
        return color

    def set_due_date(self, task_id: Optional[str], date_string: Optional[str]) -> date:
        task = self.get(task_id)
        if date_string is None:
            raise ArgMissingError("date")
        task.due_date = parse_date(date_string)
        return task.due_date

    def set_note(self, task_id: Optional[str], text: str) -> str:
        """Append a line to the note, or empty it with "clear"."""
        task = self.get(task_id)
        if text == CLEAR_TOKEN:
            task.note = ""
        elif task.note:
            task.note = f"{task.note}\n{text}"
        else:
            task.note = text
        return task.note

    def sort(self) -> None:
        """Stable sort: colored first by ordinal, then dated first by date."""
        self.root.sort(key=Task.sort_key)

    def list(self) -> List[TaskRow]:
        return [
            TaskRow(
                id=position,
                name=truncate_name(task.name),
                creation_date=task.creation_date,
                due_date=task.due_date,
                color=task.color,
                overdue=task.is_overdue,
                has_note=bool(task.note),
            )
            for position, task in enumerate(self.root, start=1)
        ]

    def show(self, task_id: Optional[str]) -> TaskView:
        index = self.resolve_id(task_id)
        task = self.root[index]
        return TaskView(
            id=index + 1,
            name=task.name,
            creation_date=task.creation_date,
            due_date=task.due_date,
            color=task.color,
            overdue=task.is_overdue,
            note_lines=wrap_note(task.note),
        )

def parse_date(date_string: str) -> date:
    """Parse a strict YYYY-MM-DD date."""
    if not DATE_PATTERN.fullmatch(date_string):
        raise InvalidDateFormatError(date_string)
    try:
        return datetime.strptime(date_string, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateFormatError(date_string) from e
