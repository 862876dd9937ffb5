import logging
import os

import click

from gantt_server.app import create_app
from gantt_server.errors import StoreError
from gantt_server.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@click.command()
@click.option('--host', default='127.0.0.1', show_default=True)
@click.option('--port', default=8080, show_default=True, type=int)
@click.option('--storage', type=click.Choice(['sqlite', 'json']), default=None,
              help='Overrides TASK_STORAGE.')
@click.option('--log-level', default=None, help='Overrides LOG_LEVEL.')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None)
@click.option('--debug', is_flag=True)
def main(host, port, storage, log_level, log_file, debug):
    """Serve the Gantt page and the /api/tasks endpoints."""
    overrides = {}
    if storage:
        overrides['TASK_STORAGE'] = storage

    level = 'DEBUG' if debug else (log_level or os.environ.get('LOG_LEVEL', 'INFO'))
    setup_logging(level=level, log_file=log_file)
    try:
        app = create_app(overrides)
    except StoreError as exc:
        logger.error('Task store initialization failed: %s', exc)
        raise click.ClickException(f'Task store initialization failed: {exc}')

    logger.info('Gantt backend listening on http://%s:%s', host, port)
    app.run(host=host, port=port, debug=debug, threaded=True)


if __name__ == '__main__':
    main()
