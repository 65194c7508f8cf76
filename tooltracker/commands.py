"""
Flask CLI commands

    flask --app run init-db
    flask --app run seed-demo
"""
from datetime import timedelta

import click

from tooltracker import db
from tooltracker.models import Job, Tool, JobToTool
from tooltracker.utils.helpers import utc_today, utcnow

DEMO_TOOLS = [
    ('DRL-0001', 'Drill'),
    ('DRL-0002', 'Drill'),
    ('HMR-0001', 'Hammer'),
    ('SAW-0001', 'Circular Saw'),
    ('LVL-0001', 'Level'),
]


def register_commands(app):

    @app.cli.command('init-db')
    def init_db():
        """Create any missing tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Insert a small demo dataset into an empty database."""
        if Tool.query.first() is not None or Job.query.first() is not None:
            click.echo('Database is not empty; skipping seed.')
            return

        today = utc_today()
        now = utcnow()

        tools = [Tool(tin=tin, tool_type=tool_type) for tin, tool_type in DEMO_TOOLS]
        active = Job(company='Acme Construction', start_date=today - timedelta(days=10))
        wrapped_up = Job(
            company='Northside Renovations',
            start_date=today - timedelta(days=40),
            end_date=today - timedelta(days=5),
            finished=True,
        )
        db.session.add_all(tools + [active, wrapped_up])
        db.session.flush()

        db.session.add_all([
            # Out with the active job
            JobToTool(job_id=active.job_id, tool_id=tools[0].tool_id, assigned_at=now - timedelta(days=9)),
            JobToTool(job_id=active.job_id, tool_id=tools[2].tool_id, assigned_at=now - timedelta(days=9)),
            # Returned from the finished job
            JobToTool(
                job_id=wrapped_up.job_id,
                tool_id=tools[1].tool_id,
                assigned_at=now - timedelta(days=39),
                returned_at=now - timedelta(days=6),
            ),
            # Never came back from the finished job
            JobToTool(job_id=wrapped_up.job_id, tool_id=tools[3].tool_id, assigned_at=now - timedelta(days=39)),
        ])
        db.session.commit()
        click.echo(f'Seeded {len(tools)} tools and 2 jobs.')
