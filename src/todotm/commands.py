"""
Command table: turns the tokens after a command name into one call against
a TaskCollection and decides what happens to the task file afterwards.
"""
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union
from .models import TaskCollection, Color, parse_date
from .data import PersistenceEngine
from .recovery import ArgMissingError, TooManyArgsError, UnknownCommandError
from .version import VERSION, LICENSE, AUTHORS, REPOSITORY
from .logs import get_logger

log = get_logger("commands")

class Persist(Enum):
    SAVE = "save"
    ROLLBACK = "rollback"
    NONE = "none"

class Session:
    """What a command handler may touch during one invocation."""

    def __init__(self, collection: TaskCollection, engine: PersistenceEngine, path: Path):
        self.collection = collection
        self.engine = engine
        self.path = path

class Outcome:
    """Result of one successful command."""

    def __init__(self, command: str, value: Any, persist: Persist):
        self.command = command
        self.value = value
        self.persist = persist

    def __repr__(self) -> str:
        return f"Outcome(command={self.command}, persist={self.persist.value})"

def _split(args: Sequence[str], count: int) -> Tuple[List[Optional[str]], List[str]]:
    """Take up to count leading tokens, padding with None, and return the rest."""
    args = list(args)
    head: List[Optional[str]] = list(args[:count])
    head.extend([None] * (count - len(head)))
    return head, args[count:]

def check_for_more_args(rest: Sequence[str]):
    if rest:
        raise TooManyArgsError(" ".join(rest))

def _add(session: Session, args: Sequence[str]) -> int:
    return session.collection.create(" ".join(args))

def _rename(session: Session, args: Sequence[str]) -> Tuple[str, str]:
    (task_id,), rest = _split(args, 1)
    new_name = " ".join(rest)
    old_name = session.collection.rename(task_id, new_name)
    return old_name, new_name

def _remove(session: Session, args: Sequence[str]) -> str:
    (task_id,), rest = _split(args, 1)
    session.collection.resolve_id(task_id)
    check_for_more_args(rest)
    return session.collection.delete(task_id).name

def _color(session: Session, args: Sequence[str]) -> Tuple[str, Optional[Color]]:
    (task_id, token), rest = _split(args, 2)
    task = session.collection.get(task_id)
    if token is None:
        raise ArgMissingError("color")
    Color.parse(token)
    check_for_more_args(rest)
    return task.name, session.collection.set_color(task_id, token)

def _due(session: Session, args: Sequence[str]) -> Tuple[str, Any]:
    (task_id, date_string), rest = _split(args, 2)
    task = session.collection.get(task_id)
    if date_string is None:
        raise ArgMissingError("date")
    parse_date(date_string)
    check_for_more_args(rest)
    return task.name, session.collection.set_due_date(task_id, date_string)

def _note(session: Session, args: Sequence[str]) -> Tuple[str, str]:
    (task_id,), rest = _split(args, 1)
    task = session.collection.get(task_id)
    if not rest:
        raise ArgMissingError("note text")
    return task.name, session.collection.set_note(task_id, " ".join(rest))

def _sort(session: Session, args: Sequence[str]) -> int:
    check_for_more_args(args)
    session.collection.sort()
    return len(session.collection)

def _list(session: Session, args: Sequence[str]):
    check_for_more_args(args)
    return session.collection.list()

def _show(session: Session, args: Sequence[str]):
    (task_id,), rest = _split(args, 1)
    session.collection.resolve_id(task_id)
    check_for_more_args(rest)
    return session.collection.show(task_id)

def _undo(session: Session, args: Sequence[str]) -> None:
    # The rollback itself happens after dispatch, like a save
    check_for_more_args(args)
    return None

def _history(session: Session, args: Sequence[str]):
    check_for_more_args(args)
    return session.engine.backups(session.path).list_generations()

def _info(session: Session, args: Sequence[str]) -> Dict[str, str]:
    check_for_more_args(args)
    return {"name": "todotm", "version": VERSION, "license": LICENSE,
            "authors": AUTHORS, "repository": REPOSITORY}

Handler = Callable[[Session, Sequence[str]], Any]

COMMANDS: Dict[str, Tuple[Handler, Persist]] = {
    "add": (_add, Persist.SAVE),
    "due": (_due, Persist.SAVE),
    "note": (_note, Persist.SAVE),
    "color": (_color, Persist.SAVE),
    "rename": (_rename, Persist.SAVE),
    "remove": (_remove, Persist.SAVE),
    "sort": (_sort, Persist.SAVE),
    "undo": (_undo, Persist.ROLLBACK),
    "list": (_list, Persist.NONE),
    "show": (_show, Persist.NONE),
    "history": (_history, Persist.NONE),
    "info": (_info, Persist.NONE),
}

def persistence_for(command: str) -> Persist:
    """What a successful run of command does to the task file."""
    try:
        return COMMANDS[command][1]
    except KeyError:
        raise UnknownCommandError(command) from None

def run_command(command: str, args: Sequence[str],
                path: Union[Path, str, None] = None,
                engine: Optional[PersistenceEngine] = None) -> Outcome:
    """Load, run one command, then save or roll back as the command requires.

    Any error propagates before the task file is touched.
    """
    if command not in COMMANDS:
        raise UnknownCommandError(command)
    handler, persist = COMMANDS[command]
    engine = engine or PersistenceEngine()
    path = Path(path) if path is not None else PersistenceEngine.default_path()

    session = Session(engine.load(path), engine, path)
    log.debug(f"Running '{command}' with {len(args)} argument(s)")
    value = handler(session, args)

    if persist is Persist.SAVE:
        engine.save(path, session.collection)
    elif persist is Persist.ROLLBACK:
        engine.rollback(path)
    return Outcome(command, value, persist)
