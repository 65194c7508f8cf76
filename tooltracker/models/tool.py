"""Tool model"""
import uuid

from sqlalchemy import Uuid

from tooltracker import db
from tooltracker.utils.helpers import format_date, format_timestamp, utc_today
from .base import TimestampMixin


class Tool(TimestampMixin, db.Model):
    """
    Tool model - a physical tool identified by its scanned barcode (TIN)
    """
    __tablename__ = 'tools'

    tool_id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tin = db.Column(db.String(255), nullable=False, unique=True)
    tool_type = db.Column(db.String(255), nullable=False)
    date_added = db.Column(db.Date, nullable=False, default=utc_today)

    __table_args__ = (
        db.Index('idx_tools_tool_type', 'tool_type'),
    )

    # Relationships
    assignments = db.relationship('JobToTool', back_populates='tool', lazy='dynamic',
                                  passive_deletes='all')

    def __repr__(self):
        return f'<Tool {self.tin} - {self.tool_type}>'

    def has_assignment_history(self):
        """True if this tool was ever assigned to a job"""
        return self.assignments.first() is not None

    def current_assignment(self):
        """The open assignment for this tool, or None"""
        from .job_to_tool import JobToTool
        return self.assignments.filter(JobToTool.returned_at.is_(None)).first()

    def to_dict(self):
        return {
            'toolId': str(self.tool_id),
            'tin': self.tin,
            'toolType': self.tool_type,
            'dateAdded': format_date(self.date_added),
            'createdAt': format_timestamp(self.created_at),
            'updatedAt': format_timestamp(self.updated_at),
        }

    def to_summary_dict(self):
        """Short form embedded in assignment payloads"""
        return {
            'toolId': str(self.tool_id),
            'tin': self.tin,
            'toolType': self.tool_type,
        }
