"""Job-to-tool assignment model"""
import uuid

from sqlalchemy import Uuid, text

from tooltracker import db
from tooltracker.utils.helpers import format_timestamp, utcnow, whole_days_between


class JobToTool(db.Model):
    """
    Assignment model - links a tool to the job it was checked out to

    A row with returned_at unset is an open assignment: the tool is out
    with that job. Rows are never deleted; returning a tool stamps
    returned_at once.
    """
    __tablename__ = 'job_to_tool'

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = db.Column(Uuid(as_uuid=True), db.ForeignKey('jobs.job_id', ondelete='RESTRICT'), nullable=False)
    tool_id = db.Column(Uuid(as_uuid=True), db.ForeignKey('tools.tool_id', ondelete='RESTRICT'), nullable=False)

    assigned_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    returned_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # Indexes
    __table_args__ = (
        db.Index('idx_job_to_tool_job_id', 'job_id'),
        db.Index('idx_job_to_tool_tool_id', 'tool_id'),
        # At most one open assignment per tool
        db.Index(
            'uq_job_to_tool_open_tool',
            'tool_id',
            unique=True,
            sqlite_where=text('returned_at IS NULL'),
            postgresql_where=text('returned_at IS NULL'),
        ),
    )

    job = db.relationship('Job', back_populates='assignments', lazy='joined')
    tool = db.relationship('Tool', back_populates='assignments', lazy='joined')

    def __repr__(self):
        return f'<JobToTool job={self.job_id} tool={self.tool_id} returned={self.is_returned}>'

    @property
    def is_returned(self):
        return self.returned_at is not None

    def duration_days(self, now=None):
        """
        Whole days the tool was (or has been) out, rounded down

        Args:
            now (datetime): Reference time for open assignments

        Returns:
            int: Days between assigned_at and returned_at (or now)
        """
        end = self.returned_at or now or utcnow()
        return whole_days_between(self.assigned_at, end)

    def to_dict(self):
        return {
            'id': str(self.id),
            'jobId': str(self.job_id),
            'toolId': str(self.tool_id),
            'assignedAt': format_timestamp(self.assigned_at),
            'returnedAt': format_timestamp(self.returned_at),
            'createdAt': format_timestamp(self.created_at),
        }
