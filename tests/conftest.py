"""
Pytest configuration and fixtures for Tool Tracker tests
"""
import pytest
from datetime import date, timedelta

from tooltracker import create_app, db
from tooltracker.models import Job, Tool, JobToTool
from tooltracker.utils.helpers import utcnow


@pytest.fixture
def app():
    """Create application instance with a fresh in-memory database"""
    app = create_app('testing')

    with app.app_context():
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def job_factory(app):
    """Factory for creating jobs directly in the database"""
    def _create_job(**kwargs):
        defaults = {
            'company': 'Acme',
            'start_date': date(2024, 1, 1),
            'end_date': None,
            'finished': False,
        }
        defaults.update(kwargs)

        job = Job(**defaults)
        db.session.add(job)
        db.session.commit()
        return job

    return _create_job


@pytest.fixture
def tool_factory(app):
    """Factory for creating tools with unique TINs"""
    counter = {'n': 0}

    def _create_tool(**kwargs):
        counter['n'] += 1
        defaults = {
            'tin': f'TIN-{counter["n"]:04d}',
            'tool_type': 'Drill',
        }
        defaults.update(kwargs)

        tool = Tool(**defaults)
        db.session.add(tool)
        db.session.commit()
        return tool

    return _create_tool


@pytest.fixture
def assignment_factory(app):
    """Factory for creating assignment rows with explicit timestamps"""
    def _create_assignment(job, tool, assigned_at=None, returned_at=None):
        assignment = JobToTool(
            job_id=job.job_id,
            tool_id=tool.tool_id,
            assigned_at=assigned_at or utcnow(),
            returned_at=returned_at,
        )
        db.session.add(assignment)
        db.session.commit()
        return assignment

    return _create_assignment


@pytest.fixture
def test_job(job_factory):
    """An open job for Acme"""
    return job_factory(company='Acme', start_date=date(2024, 1, 1))


@pytest.fixture
def test_tool(tool_factory):
    """A drill with TIN ABC123"""
    return tool_factory(tin='ABC123', tool_type='Drill')


@pytest.fixture
def finished_job(job_factory):
    """A finished job whose end date has passed"""
    today = utcnow().date()
    return job_factory(
        company='Northside Renovations',
        start_date=today - timedelta(days=30),
        end_date=today - timedelta(days=3),
        finished=True,
    )
