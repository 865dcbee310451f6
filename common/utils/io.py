import json
import shutil
from pathlib import Path
from typing import Any


def write_json(path: Path, data: Any, indent: int | None = 2) -> None:
    """
    Write a JSON file with UTF-8 encoding and LF line endings.
    Creates parent directories if needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(
            data,
            f,
            ensure_ascii=False,
            indent=indent,
        )


def reset_dir(path: Path) -> None:
    """
    Delete `path` with everything below it and create it again empty.
    Destructive: never point this at a directory holding unrelated data.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
