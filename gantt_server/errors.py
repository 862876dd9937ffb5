# errors.py
"""Errors raised by the task stores.

Every store error maps onto an HTTP status so the API layer can turn it into a
JSON error response without knowing which backend raised it.
"""
from __future__ import annotations

from typing import Optional


class StoreError(Exception):
    status_code = 500


# flat-file store
class ReadError(StoreError):
    pass


class ParseError(StoreError):
    pass


class SerializeError(StoreError):
    pass


class WriteError(StoreError):
    pass


# relational store
class QueryError(StoreError):
    pass


class ScanError(StoreError):
    pass


class TransactionError(StoreError):
    pass


class PrepareError(StoreError):
    pass


class ExecError(StoreError):
    def __init__(self, message: str, task_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.task_id = task_id


class TaskNotFound(StoreError):
    status_code = 404

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id
