"""SQLAlchemy models package"""
from .job import Job
from .tool import Tool
from .job_to_tool import JobToTool

__all__ = [
    'Job',
    'Tool',
    'JobToTool',
]
