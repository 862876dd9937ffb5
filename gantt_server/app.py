import json
import logging
import os
from pathlib import Path

import click
from flask import Blueprint, Flask, Response, current_app, jsonify, request
from flask.cli import with_appcontext
from werkzeug.exceptions import InternalServerError, MethodNotAllowed

from gantt_server.data import default_tasks
from gantt_server.db import SqlTaskStore
from gantt_server.errors import StoreError
from gantt_server.forms import PayloadError, parse_task_list
from gantt_server.json_store import JsonTaskStore
from gantt_server.models import db

logger = logging.getLogger(__name__)

STORE_KEY = 'task_store'
TASK_METHODS = ['GET', 'POST', 'DELETE']

bp = Blueprint('gantt', __name__)


def get_store():
    return current_app.extensions[STORE_KEY]


def build_store(app):
    """Create the store named by TASK_STORAGE."""
    storage = app.config['TASK_STORAGE']
    if storage == 'json':
        return JsonTaskStore(app.config['TASKS_JSON_PATH'])
    if storage == 'sqlite':
        db.init_app(app)
        return SqlTaskStore.init(app)
    raise ValueError(f'Unknown TASK_STORAGE {storage!r}, expected "sqlite" or "json"')


def create_app(test_config=None, store=None):
    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config['TASK_STORAGE'] = os.environ.get('TASK_STORAGE', 'sqlite')
    app.config['TASKS_DB_PATH'] = os.environ.get('TASKS_DB_PATH', 'gantt.db')
    app.config['TASKS_JSON_PATH'] = os.environ.get('TASKS_JSON_PATH', 'tasks.json')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if test_config:
        app.config.update(test_config)
    app.config.setdefault(
        'SQLALCHEMY_DATABASE_URI',
        'sqlite:///' + str(Path(app.config['TASKS_DB_PATH']).resolve()),
    )

    app.extensions[STORE_KEY] = store if store is not None else build_store(app)
    app.register_blueprint(bp)
    app.register_error_handler(StoreError, handle_store_error)
    app.register_error_handler(MethodNotAllowed, handle_method_not_allowed)
    app.register_error_handler(InternalServerError, handle_internal_error)
    app.cli.add_command(reset_tasks_command)
    logger.info('App ready with %s', type(app.extensions[STORE_KEY]).__name__)
    return app


def handle_store_error(exc):
    log = logger.warning if exc.status_code < 500 else logger.error
    log('Store failure on %s %s: %s', request.method, request.path, exc)
    return jsonify(error=str(exc)), exc.status_code


def handle_method_not_allowed(exc):
    if not request.path.startswith('/api/'):
        return exc
    response = jsonify(error='Method not allowed')
    response.status_code = 405
    allowed = [m for m in (exc.valid_methods or []) if m not in ('HEAD', 'OPTIONS')]
    response.headers['Allow'] = ', '.join(allowed)
    return response


def handle_internal_error(exc):
    if not request.path.startswith('/api/'):
        return exc
    original = getattr(exc, 'original_exception', None)
    logger.error('Unhandled error on %s %s: %r', request.method, request.path, original or exc)
    return jsonify(error='Internal server error'), 500


@bp.route('/')
def index():
    page = Path(current_app.static_folder) / 'index.html'
    try:
        html = page.read_bytes()
    except OSError as exc:
        return Response(f'Error: cannot read index.html. Detail: {exc}', status=500, mimetype='text/plain')
    return Response(html, mimetype='text/html')


@bp.route('/api/tasks', methods=['GET'], provide_automatic_options=False)
def list_tasks():
    # the GET rule also matches HEAD
    if request.method == 'HEAD':
        raise MethodNotAllowed(valid_methods=TASK_METHODS)
    tasks = get_store().load()
    return jsonify([task.to_dict() for task in tasks])


@bp.route('/api/tasks', methods=['POST'], provide_automatic_options=False)
def replace_tasks():
    body = request.get_data(as_text=True)
    try:
        payload = json.loads(body)
    except ValueError as exc:
        return jsonify(error=f'Invalid JSON: {exc}'), 400

    try:
        tasks = parse_task_list(payload)
    except PayloadError as exc:
        return jsonify(error=str(exc), details=exc.details), 400

    get_store().replace_all(tasks)
    logger.info('Task collection replaced with %d tasks', len(tasks))
    return jsonify(message='Tasks saved', count=len(tasks))


@bp.route('/api/tasks', methods=['DELETE'], provide_automatic_options=False)
def delete_task():
    raw_id = request.args.get('id')
    if raw_id is None or raw_id.strip() == '':
        return jsonify(error='Missing id query parameter'), 400
    try:
        task_id = int(raw_id)
    except ValueError:
        return jsonify(error=f'Invalid task id {raw_id!r}'), 400

    get_store().delete_by_id(task_id)
    return jsonify(message=f'Task {task_id} deleted')


@click.command('reset-tasks')
@with_appcontext
def reset_tasks_command():
    """Replace the stored tasks with the default collection."""
    tasks = default_tasks()
    get_store().replace_all(tasks)
    click.echo(f'Reset task collection to {len(tasks)} default tasks.')
