"""SQLAlchemy-backed task store persisting the collection in the tasks table."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List

from flask import Flask
from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import ArgumentError, CompileError, SQLAlchemyError

from gantt_server.data import Task, default_tasks
from gantt_server.errors import ExecError, PrepareError, QueryError, ScanError, TransactionError
from gantt_server.models import TaskRecord, db
from gantt_server.store import TaskStore

logger = logging.getLogger(__name__)


class SqlTaskStore(TaskStore):
    """
    Relational task store.

    Each call pushes its own application context, so it gets a fresh
    Flask-SQLAlchemy session that is removed when the call returns.
    Isolation between concurrent writers is left to the database engine.
    """

    def __init__(self, app: Flask) -> None:
        self._app = app

    @property
    def app(self) -> Flask:
        return self._app

    @classmethod
    def init(cls, app: Flask, seed: Callable[[], List[Task]] = default_tasks) -> "SqlTaskStore":
        """Create the tasks table if needed and seed it when empty.

        ``db.init_app(app)`` must already have been called.
        """
        store = cls(app)
        with app.app_context():
            try:
                db.create_all()
                count = db.session.scalar(select(func.count()).select_from(TaskRecord))
            except SQLAlchemyError as exc:
                raise QueryError(f"cannot prepare tasks table: {exc}") from exc
        if count == 0:
            tasks = seed()
            logger.info("Tasks table is empty, seeding %d default tasks", len(tasks))
            store.replace_all(tasks)
            count = len(tasks)
        logger.info("SqlTaskStore ready db=%s total=%s", app.config["SQLALCHEMY_DATABASE_URI"], count)
        return store

    def load(self) -> List[Task]:
        with self._app.app_context():
            try:
                records = db.session.execute(
                    select(TaskRecord).order_by(TaskRecord.priority, TaskRecord.id)
                ).scalars().all()
            except SQLAlchemyError as exc:
                raise QueryError(f"cannot query tasks: {exc}") from exc

            tasks = []
            for record in records:
                try:
                    tasks.append(record.to_task())
                except (KeyError, TypeError, ValueError) as exc:
                    raise ScanError(f"cannot read task row {record.id}: {exc}") from exc
            return tasks

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Delete every row then insert ``tasks``, all in one transaction."""
        rows = [TaskRecord.row_for(task) for task in tasks]
        table = TaskRecord.__table__

        with self._app.app_context():
            session = db.session
            try:
                session.begin()
            except SQLAlchemyError as exc:
                raise TransactionError(f"cannot begin transaction: {exc}") from exc

            try:
                session.execute(delete(table))
            except SQLAlchemyError as exc:
                session.rollback()
                raise ExecError(f"cannot clear tasks table: {exc}") from exc

            try:
                statement = self._prepare_insert(session, rows)
            except PrepareError:
                session.rollback()
                raise

            for row in rows:
                try:
                    session.execute(statement, row)
                except SQLAlchemyError as exc:
                    session.rollback()
                    logger.error("Insert of task %s failed, rolled back", row["id"])
                    raise ExecError(f"cannot insert task {row['id']}: {exc}", task_id=row["id"]) from exc

            try:
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise TransactionError(f"cannot commit tasks: {exc}") from exc

        logger.info("Replaced tasks table with %d rows", len(rows))

    @staticmethod
    def _prepare_insert(session, rows: List[dict]):
        """Compile one insert over every column; each row must carry exactly those keys."""
        table = TaskRecord.__table__
        columns = [column.key for column in table.c]
        for row in rows:
            if set(row) != set(columns):
                raise PrepareError(
                    f"task {row.get('id')} has columns {sorted(row)}, expected {sorted(columns)}"
                )
        statement = insert(table)
        try:
            statement.compile(dialect=session.get_bind().dialect, column_keys=columns)
        except (ArgumentError, CompileError) as exc:
            raise PrepareError(f"cannot prepare task insert: {exc}") from exc
        return statement

    def close(self) -> None:
        with self._app.app_context():
            db.engine.dispose()
