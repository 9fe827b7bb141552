import tempfile, json, os
from typing import Union, Any, Optional
from pathlib import Path
from todotm.recovery import FileOperationError, CreateDirError, FatalError, CorruptionError
from todotm.logs import get_logger

log = get_logger("data.io")

def _cleanup(temp_path: Optional[str]):
    """Remove a temporary file left behind by a failed write."""
    if temp_path is None or not os.path.exists(temp_path):
        return
    try:
        os.unlink(temp_path)
        log.debug(f"Cleaned up temporary file: {temp_path}")
    except OSError as cleanup_error:
        # The original failure is what gets raised; this one is only logged
        log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def create_dirs(file_path: Path):
    """Create the parent directory of file_path if it is missing."""
    if file_path.parent.exists():
        return
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        log.info(f"Created data directory {file_path.parent}")
    except OSError as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise CreateDirError(error_msg) from e

def encode_json(data: Any) -> str:
    """Serialize data to JSON text, treating failure as fatal."""
    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        # FATAL ERROR: Data cannot be serialized
        error_msg = ("Data serialization failed. "
                     f"In-memory data may be corrupt or contain non-serializable types: {e}")
        log.critical(error_msg)
        raise FatalError(error_msg) from e

def atomic_write(file_path: Union[Path, str], text: str):
    """
    Write text to file_path using an atomic replace.

    The content goes to a temporary file in the same directory, is flushed
    and fsynced, then moved over the target with os.replace.
    """
    file_path = Path(file_path)
    temp_path = None

    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', dir=file_path.parent,
                                         prefix=f".{file_path.name}.", suffix='.tmp',
                                         delete=False) as temp_file:
            temp_path = temp_file.name
            temp_file.write(text)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        # Atomic replace - this either completely succeeds or completely fails
        os.replace(temp_path, file_path)
        log.debug(f"Successfully saved file: {file_path}")

    except OSError as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving file {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def read_text(file_path: Union[Path, str]) -> Optional[str]:
    """
    Read a whole file.

    Args:
        file_path: Path to the file

    Returns:
        The file contents, or None if the file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError as e:
        # Not a text file at all
        error_msg = f"File {file_path} is not valid UTF-8 text: {e}"
        log.critical(error_msg)
        raise CorruptionError(error_msg) from e
    except OSError as e:
        error_msg = f"Failed to read file {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e
