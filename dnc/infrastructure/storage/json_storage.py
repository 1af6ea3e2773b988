"""JSON file storage with Result-based error handling.

A thin wrapper around file I/O for JSON documents. Missing files, bad
JSON and OS failures come back as typed errors inside ``Err`` instead
of exceptions. Messages describe the failure only; the path is kept in
the error's ``field``. Writes go to a temporary file in the target directory
and are renamed into place, so a reader never sees half a document.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from dnc.domain.shared import (
    CorruptDataError,
    Err,
    NotFoundError,
    Ok,
    Result,
    StorageIOError,
    StoreError,
)


def _describe(error: OSError) -> str:
    return error.strerror or type(error).__name__


def _default_file_mode() -> int:
    """Mode a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class JsonStorage:
    """Low-level JSON file I/O. No domain logic, just files.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path(".dnc/proj-x/task.json"))
        if isinstance(result, Ok):
            data = result.value
        else:
            print(f"Error: {result.error}")
    """

    def load_json(self, path: Path) -> Result[dict[str, Any], StoreError]:
        """Load a JSON object from a file.

        Args:
            path: File to read.

        Returns:
            Ok(dict), or Err(NotFoundError | CorruptDataError | StorageIOError).
        """
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Err(NotFoundError("file not found", field=str(path)))
        except PermissionError:
            return Err(StorageIOError("permission denied reading file", field=str(path)))
        except OSError as e:
            return Err(StorageIOError(f"error reading file: {_describe(e)}", field=str(path)))

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            return Err(
                CorruptDataError(
                    f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})", field=str(path)
                )
            )

        if not isinstance(data, dict):
            return Err(CorruptDataError("expected a JSON object", field=str(path)))
        return Ok(data)

    def save_json(
        self,
        path: Path,
        data: dict[str, Any],
        indent: int = 2,
    ) -> Result[None, StoreError]:
        """Atomically replace a file with JSON data.

        The parent directory is created if needed.

        Args:
            path: File to write.
            data: Dictionary to serialize.
            indent: JSON indentation level (default 2).

        Returns:
            Ok(None), or Err(StorageIOError).
        """
        try:
            content = json.dumps(data, indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            return Err(StorageIOError(f"data not JSON serializable: {e}", field=str(path)))

        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.chmod(tmp_name, _default_file_mode())
            os.replace(tmp_name, path)
            return Ok(None)
        except PermissionError:
            return Err(StorageIOError("permission denied writing file", field=str(path)))
        except OSError as e:
            return Err(StorageIOError(f"error writing file: {_describe(e)}", field=str(path)))
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def remove_tree(self, directory: Path) -> Result[None, StoreError]:
        """Recursively delete a directory. A missing directory is fine.

        Returns:
            Ok(None), or Err(StorageIOError).
        """
        try:
            shutil.rmtree(directory)
            return Ok(None)
        except FileNotFoundError:
            return Ok(None)
        except PermissionError:
            return Err(StorageIOError("permission denied deleting directory", field=str(directory)))
        except OSError as e:
            return Err(StorageIOError(f"error deleting directory: {_describe(e)}", field=str(directory)))

    def list_dirs(self, directory: Path) -> Result[list[str], StoreError]:
        """Names of the immediate subdirectories, sorted.

        A missing directory yields an empty list.

        Returns:
            Ok(list[str]), or Err(StorageIOError).
        """
        try:
            names = [entry.name for entry in directory.iterdir() if entry.is_dir()]
        except FileNotFoundError:
            return Ok([])
        except PermissionError:
            return Err(StorageIOError("permission denied listing directory", field=str(directory)))
        except OSError as e:
            return Err(StorageIOError(f"error listing directory: {_describe(e)}", field=str(directory)))
        return Ok(sorted(names))
