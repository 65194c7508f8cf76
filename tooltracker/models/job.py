"""Job model"""
import uuid

from sqlalchemy import Uuid

from tooltracker import db
from tooltracker.utils.helpers import format_date, format_timestamp
from .base import TimestampMixin


class Job(TimestampMixin, db.Model):
    """
    Job model - a work engagement with a company over a date range
    Tools are checked out to jobs through JobToTool
    """
    __tablename__ = 'jobs'

    job_id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company = db.Column(db.String(255), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    finished = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.Index('idx_jobs_company', 'company'),
        db.Index('idx_jobs_finished', 'finished'),
    )

    # Relationships
    assignments = db.relationship('JobToTool', back_populates='job', lazy='dynamic',
                                  passive_deletes='all')

    def __repr__(self):
        return f'<Job {self.job_id} - {self.company}>'

    def has_assignment_history(self):
        """True if any tool was ever assigned to this job"""
        return self.assignments.first() is not None

    def to_dict(self):
        return {
            'jobId': str(self.job_id),
            'company': self.company,
            'startDate': format_date(self.start_date),
            'endDate': format_date(self.end_date),
            'finished': self.finished,
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }

    def to_summary_dict(self):
        """Short form embedded in assignment payloads"""
        return {
            'jobId': str(self.job_id),
            'company': self.company,
            'startDate': format_date(self.start_date),
            'endDate': format_date(self.end_date),
            'finished': self.finished,
        }
