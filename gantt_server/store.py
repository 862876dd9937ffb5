# store.py
"""Contract shared by the flat-file and relational task stores."""
from __future__ import annotations

import abc
import logging
from typing import Iterable, List

from gantt_server.data import Task
from gantt_server.errors import TaskNotFound

logger = logging.getLogger(__name__)


class TaskStore(abc.ABC):
    """
    Holds the whole task collection.

    There is no per-record update: every write goes through replace_all, which
    substitutes the entire persisted collection.
    """

    @abc.abstractmethod
    def load(self) -> List[Task]:
        """Return the current collection."""

    @abc.abstractmethod
    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Overwrite the persisted collection with ``tasks``."""

    def delete_by_id(self, task_id: int) -> None:
        """Remove one task by loading, filtering and replacing the rest.

        Raises TaskNotFound without writing anything when the id is absent.
        """
        tasks = self.load()
        remaining = [task for task in tasks if task.id != task_id]
        if len(remaining) == len(tasks):
            raise TaskNotFound(task_id)
        self.replace_all(remaining)
        logger.info("Deleted task %s, %d left", task_id, len(remaining))

    def close(self) -> None:
        return
