"""
Result shapes, one per endpoint contract

Each function returns a plain dict with a fixed set of camelCase keys.
"""
from tooltracker.utils.helpers import format_timestamp


def serialize_tool_with_current_job(tool, assignment):
    """Tool plus where it currently is (TIN lookup)"""
    data = tool.to_dict()
    data['currentJob'] = assignment.job.to_summary_dict() if assignment else None
    data['isCurrentlyAssigned'] = assignment is not None
    if assignment:
        data['assignmentId'] = str(assignment.id)
    return data


def serialize_tool_detail(tool, assignments):
    """Tool plus its full assignment history (GET /tools/<id>)"""
    current = next((a for a in assignments if not a.is_returned), None)
    data = tool.to_dict()
    data['jobHistory'] = [
        {
            'id': str(a.id),
            'assignedAt': format_timestamp(a.assigned_at),
            'returnedAt': format_timestamp(a.returned_at),
            'job': a.job.to_summary_dict(),
        }
        for a in assignments
    ]
    data['currentJob'] = current.job.to_summary_dict() if current else None
    data['isCurrentlyAssigned'] = current is not None
    return data


def serialize_created_assignment(assignment):
    data = assignment.to_dict()
    data['tool'] = assignment.tool.to_summary_dict()
    data['job'] = {
        'jobId': str(assignment.job.job_id),
        'company': assignment.job.company,
    }
    return data


def serialize_assignment_row(assignment):
    """Assignment listing row with both sides of the relationship"""
    return {
        'id': str(assignment.id),
        'assignedAt': format_timestamp(assignment.assigned_at),
        'returnedAt': format_timestamp(assignment.returned_at),
        'isReturned': assignment.is_returned,
        'tool': assignment.tool.to_summary_dict(),
        'job': assignment.job.to_summary_dict(),
    }


def serialize_job_tool(assignment):
    """Tool as seen from a job's assignment list"""
    data = assignment.tool.to_dict()
    data.update({
        'assignmentId': str(assignment.id),
        'assignedAt': format_timestamp(assignment.assigned_at),
        'returnedAt': format_timestamp(assignment.returned_at),
        'isReturned': assignment.is_returned,
    })
    return data


def serialize_job_tool_with_duration(assignment, now):
    data = serialize_job_tool(assignment)
    data['durationDays'] = assignment.duration_days(now)
    data['status'] = 'returned' if assignment.is_returned else 'assigned'
    return data


def serialize_missing_tool(assignment, now):
    return {
        'assignmentId': str(assignment.id),
        'assignedAt': format_timestamp(assignment.assigned_at),
        'daysSinceAssigned': assignment.duration_days(now),
        'tool': assignment.tool.to_summary_dict(),
        'job': assignment.job.to_summary_dict(),
    }


def serialize_overdue_return(assignment, days_overdue):
    return {
        'assignmentId': str(assignment.id),
        'assignedAt': format_timestamp(assignment.assigned_at),
        'tool': assignment.tool.to_summary_dict(),
        'job': assignment.job.to_summary_dict(),
        'daysOverdue': days_overdue,
    }


def serialize_company_tool(assignment):
    data = assignment.tool.to_summary_dict()
    data.update({
        'assignmentId': str(assignment.id),
        'assignedAt': format_timestamp(assignment.assigned_at),
        'job': assignment.job.to_summary_dict(),
    })
    if assignment.is_returned:
        data['returnedAt'] = format_timestamp(assignment.returned_at)
    return data


def serialize_history_entry(assignment, now):
    return {
        'assignmentId': str(assignment.id),
        'assignedAt': format_timestamp(assignment.assigned_at),
        'returnedAt': format_timestamp(assignment.returned_at),
        'isReturned': assignment.is_returned,
        'isCurrentlyAssigned': not assignment.is_returned,
        'durationDays': assignment.duration_days(now),
        'job': assignment.job.to_summary_dict(),
    }
