"""Task-list backend for a Gantt-chart front end."""

__version__ = "0.1.0"
