# json_store.py
"""Flat-file task store: the collection lives in one pretty-printed JSON file."""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Union

from gantt_server.data import Task, default_tasks
from gantt_server.errors import ParseError, ReadError, SerializeError, WriteError
from gantt_server.store import TaskStore

logger = logging.getLogger(__name__)


class JsonTaskStore(TaskStore):
    """
    JSON file task store.

    Thread-safety:
    - one re-entrant lock per store guards every read, write and the
      read-modify-write of delete_by_id
    - writes go to a temp file that is renamed over the target, so a reader
      never sees a half-written document
    """

    def __init__(
        self,
        path: Union[str, Path] = "tasks.json",
        seed: Callable[[], List[Task]] = default_tasks,
    ) -> None:
        self._path = Path(path)
        self._seed = seed
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Task]:
        with self._lock:
            if not self._path.exists():
                tasks = self._seed()
                logger.info("No task file at %s, seeding %d default tasks", self._path, len(tasks))
                self._write(tasks)
                return tasks
            return self._read()

    def replace_all(self, tasks: Iterable[Task]) -> None:
        tasks = list(tasks)
        with self._lock:
            self._write(tasks)
        logger.info("Saved %d tasks to %s", len(tasks), self._path)

    def delete_by_id(self, task_id: int) -> None:
        with self._lock:
            super().delete_by_id(task_id)

    # ---- low-level helpers ----

    def _read(self) -> List[Task]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ReadError(f"cannot read {self._path}: {exc}") from exc

        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise ParseError(f"malformed task file {self._path}: {exc}") from exc
        if not isinstance(payload, list):
            raise ParseError(f"task file {self._path} does not hold a JSON array")

        try:
            return [Task.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseError(f"invalid task in {self._path}: {exc}") from exc

    def _write(self, tasks: List[Task]) -> None:
        try:
            document = json.dumps([task.to_dict() for task in tasks], indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SerializeError(f"cannot encode tasks: {exc}") from exc

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.stem}_",
                suffix=".json.tmp",
            )
        except OSError as exc:
            raise WriteError(f"cannot write {self._path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
                f.write("\n")
            os.replace(temp_path, self._path)
        except OSError as exc:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise WriteError(f"cannot write {self._path}: {exc}") from exc
