from flask_sqlalchemy import SQLAlchemy

from gantt_server.data import Task

db = SQLAlchemy()


class TaskRecord(db.Model):
    __tablename__ = 'tasks'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text)
    start = db.Column(db.Text)
    # column name matches the JSON key the front end sends
    duration_days = db.Column('durationDays', db.Integer)
    color = db.Column(db.Text)
    priority = db.Column(db.Integer)

    @staticmethod
    def row_for(task):
        """Insert parameters for one task, keyed by column name."""
        return {
            'id': task.id,
            'name': task.name,
            'start': task.start,
            'durationDays': task.duration_days,
            'color': task.color,
            'priority': task.priority,
        }

    def to_task(self):
        return Task.from_dict({
            'id': self.id,
            'name': self.name,
            'start': self.start,
            'durationDays': self.duration_days,
            'color': self.color,
            'priority': self.priority,
        })

    def __repr__(self):
        return f'<TaskRecord {self.id} {self.name}>'
