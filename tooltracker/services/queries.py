"""
Derived read-only queries over the assignment table

Nothing here writes; every function can be retried freely. Post-processing
is limited to day arithmetic and counting.
"""
from collections import OrderedDict

from sqlalchemy import exists, func

from tooltracker import db
from tooltracker.models import Job, Tool, JobToTool
from tooltracker.serializers import (
    serialize_assignment_row,
    serialize_company_tool,
    serialize_history_entry,
    serialize_job_tool,
    serialize_job_tool_with_duration,
    serialize_missing_tool,
    serialize_overdue_return,
)
from tooltracker.utils.helpers import format_date, mean, round_half_up, utc_today, utcnow, whole_days_between


def tool_is_out_clause(job_id=None):
    """EXISTS clause matching tools with an open assignment (optionally to one job)"""
    criteria = [JobToTool.tool_id == Tool.tool_id, JobToTool.returned_at.is_(None)]
    if job_id is not None:
        criteria.append(JobToTool.job_id == job_id)
    return exists().where(*criteria)


def available_tools():
    """Tools with no open assignment, most recently added first"""
    return (
        Tool.query
        .filter(~tool_is_out_clause())
        .order_by(Tool.date_added.desc(), Tool.created_at.desc())
        .all()
    )


def job_tools(job):
    """Every assignment of a job with a returned/missing breakdown"""
    assignments = job.assignments.order_by(JobToTool.assigned_at.desc()).all()
    tools = [serialize_job_tool(a) for a in assignments]
    returned = sum(1 for a in assignments if a.is_returned)
    return {
        'tools': tools,
        'summary': {
            'total': len(assignments),
            'returned': returned,
            'missing': len(assignments) - returned,
        },
    }


def missing_tools_for_job(job):
    """Tools still out with a job"""
    assignments = (
        job.assignments
        .filter(JobToTool.returned_at.is_(None))
        .order_by(JobToTool.assigned_at, JobToTool.id)
        .all()
    )
    tools = [a.tool.to_dict() for a in assignments]
    return {'tools': tools, 'count': len(tools)}


def all_missing_tools():
    """Every open assignment across all jobs, longest out first"""
    now = utcnow()
    assignments = (
        JobToTool.query
        .filter(JobToTool.returned_at.is_(None))
        .order_by(JobToTool.assigned_at, JobToTool.id)
        .all()
    )
    tools = [serialize_missing_tool(a, now) for a in assignments]
    return {'tools': tools, 'count': len(tools)}


def currently_assigned_tools():
    """Every open assignment with its tool and job, newest first"""
    assignments = (
        JobToTool.query
        .filter(JobToTool.returned_at.is_(None))
        .order_by(JobToTool.assigned_at.desc(), JobToTool.id)
        .all()
    )
    tools = [serialize_assignment_row(a) for a in assignments]
    return {'tools': tools, 'count': len(tools)}


def overdue_returns():
    """Open assignments of finished jobs whose end date has passed"""
    today = utc_today()
    assignments = (
        JobToTool.query
        .join(Job, JobToTool.job_id == Job.job_id)
        .filter(
            JobToTool.returned_at.is_(None),
            Job.finished.is_(True),
            Job.end_date.isnot(None),
            Job.end_date < today,
        )
        .order_by(Job.end_date, JobToTool.assigned_at)
        .all()
    )
    tools = [
        serialize_overdue_return(a, whole_days_between(a.job.end_date, today))
        for a in assignments
    ]
    return {'tools': tools, 'count': len(tools)}


def tool_usage_stats():
    """Per-tool assignment counts, status and companies, plus an overall summary"""
    tools = Tool.query.order_by(Tool.tin).all()
    assignments_by_tool = {}
    for assignment in JobToTool.query.order_by(JobToTool.assigned_at).all():
        assignments_by_tool.setdefault(assignment.tool_id, []).append(assignment)

    stats = []
    for tool in tools:
        assignments = assignments_by_tool.get(tool.tool_id, [])
        total = len(assignments)
        completed = sum(1 for a in assignments if a.is_returned)
        companies = sorted({a.job.company for a in assignments})
        stats.append({
            'toolId': str(tool.tool_id),
            'tin': tool.tin,
            'toolType': tool.tool_type,
            'dateAdded': format_date(tool.date_added),
            'totalAssignments': total,
            'completedAssignments': completed,
            'currentlyAssigned': completed < total,
            'companiesUsed': companies,
            'usageRate': (completed / total * 100) if total else 0,
        })

    summary = {
        'totalTools': len(stats),
        'totalAssignments': sum(s['totalAssignments'] for s in stats),
        'toolsCurrentlyAssigned': sum(1 for s in stats if s['currentlyAssigned']),
        'averageUsageRate': mean(s['usageRate'] for s in stats),
    }
    return {'tools': stats, 'summary': summary}


def company_tools(company):
    """Assignments of jobs whose company matches, split into current and historical"""
    assignments = (
        JobToTool.query
        .join(Job, JobToTool.job_id == Job.job_id)
        .filter(Job.company.icontains(company, autoescape=True))
        .order_by(JobToTool.assigned_at.desc(), JobToTool.id)
        .all()
    )
    current = [a for a in assignments if not a.is_returned]
    historical = [a for a in assignments if a.is_returned]
    return {
        'company': company,
        'currentTools': [serialize_company_tool(a) for a in current],
        'historicalTools': [serialize_company_tool(a) for a in historical],
        'summary': {
            'currentlyAssigned': len(current),
            'historicalAssignments': len(historical),
            'totalAssignments': len(assignments),
            'activeJobs': len({a.job_id for a in current}),
        },
    }


def job_history(tool):
    """Every job a tool has been out with, with durations in whole days"""
    now = utcnow()
    assignments = tool.assignments.order_by(JobToTool.assigned_at.desc(), JobToTool.id).all()
    history = [serialize_history_entry(a, now) for a in assignments]
    return {
        'history': history,
        'summary': {
            'totalAssignments': len(history),
            'currentlyAssigned': any(h['isCurrentlyAssigned'] for h in history),
            'averageDurationDays': round_half_up(mean(h['durationDays'] for h in history)),
            'uniqueCompanies': len({a.job.company for a in assignments}),
        },
    }


def tools_by_job(job):
    """A job's tools with duration and status, plus a summary"""
    now = utcnow()
    assignments = job.assignments.order_by(JobToTool.assigned_at.desc(), JobToTool.id).all()
    tools = [serialize_job_tool_with_duration(a, now) for a in assignments]
    returned = sum(1 for t in tools if t['isReturned'])
    return {
        'jobId': str(job.job_id),
        'tools': tools,
        'summary': {
            'totalTools': len(tools),
            'returnedTools': returned,
            'missingTools': len(tools) - returned,
            'averageDurationDays': round_half_up(mean(t['durationDays'] for t in tools)),
            'toolTypes': list(OrderedDict.fromkeys(t['toolType'] for t in tools)),
        },
    }


def tool_counts_by_type():
    """Number of tools per tool type, alphabetical"""
    rows = (
        db.session.query(Tool.tool_type, func.count(Tool.tool_id))
        .group_by(Tool.tool_type)
        .order_by(Tool.tool_type)
        .all()
    )
    return [{'toolType': tool_type, 'count': count} for tool_type, count in rows]
