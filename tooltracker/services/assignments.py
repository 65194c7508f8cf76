"""
Assignment lifecycle: assigning tools to jobs and returning them

Both operations validate the whole batch before writing anything and
commit the check and the write in a single transaction. The partial
unique index on job_to_tool(tool_id) WHERE returned_at IS NULL is the
last line against two requests assigning the same tool at once.
"""
import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from tooltracker import db
from tooltracker.errors import BadRequestError, ConflictError, NotFoundError, JOB_NOT_FOUND, TOOL_NOT_FOUND
from tooltracker.models import Job, Tool, JobToTool
from tooltracker.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def get_job_or_404(job_id):
    job = db.session.get(Job, job_id)
    if job is None:
        raise NotFoundError(JOB_NOT_FOUND)
    return job


def get_tool_or_404(tool_id):
    tool = db.session.get(Tool, tool_id)
    if tool is None:
        raise NotFoundError(TOOL_NOT_FOUND)
    return tool


def open_assignments_query():
    """Assignments whose tool is still out"""
    return JobToTool.query.filter(JobToTool.returned_at.is_(None))


def assign_tools(job_id, tool_ids):
    """
    Check tools out to a job

    Preconditions are checked in order: the job exists, the job is not
    finished, every tool exists, no tool is already out.

    Args:
        job_id (UUID): Target job
        tool_ids (list[UUID]): Distinct tool IDs, at least one

    Returns:
        list[JobToTool]: The new open assignments, in request order

    Raises:
        NotFoundError: Job or any tool missing
        BadRequestError: Job is finished
        ConflictError: A tool already has an open assignment
    """
    job = get_job_or_404(job_id)
    if job.finished:
        raise BadRequestError('Cannot assign tools to finished job')

    # Row locks serialize concurrent assignment of the same tools on PostgreSQL
    tools = Tool.query.filter(Tool.tool_id.in_(tool_ids)).with_for_update().all()
    if len(tools) != len(tool_ids):
        raise NotFoundError('One or more tools not found')

    tools_by_id = {tool.tool_id: tool for tool in tools}
    already_out = {
        a.tool_id for a in open_assignments_query().filter(JobToTool.tool_id.in_(tool_ids)).all()
    }
    if already_out:
        tins = [tools_by_id[tool_id].tin for tool_id in tool_ids if tool_id in already_out]
        raise ConflictError(f'Tools already assigned: {", ".join(tins)}')

    now = utcnow()
    assignments = [
        JobToTool(job_id=job.job_id, tool_id=tool_id, assigned_at=now)
        for tool_id in tool_ids
    ]
    db.session.add_all(assignments)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.warning('Concurrent assignment detected for job %s', job_id)
        raise ConflictError('One or more tools were assigned by another request')

    logger.info('Assigned %d tools to job %s', len(assignments), job_id)
    return assignments


def return_tools(job_id, tool_ids):
    """
    Check tools back in from a job and report what is still outstanding

    The request is all or nothing: if any named tool is not currently out
    with this job, nothing is returned.

    Args:
        job_id (UUID): Job the tools are coming back from
        tool_ids (list[UUID]): Distinct tool IDs, at least one

    Returns:
        dict: returnedTools, missingTools, job, summary

    Raises:
        NotFoundError: Job missing, or none of the tools is out with it
        BadRequestError: Some of the tools are not out with this job
        ConflictError: Another request returned the same tools meanwhile
    """
    job = get_job_or_404(job_id)

    open_rows = open_assignments_query().filter(
        JobToTool.job_id == job_id,
        JobToTool.tool_id.in_(tool_ids),
    ).all()
    if not open_rows:
        raise NotFoundError('No active assignments found for the specified tools and job')

    assigned_ids = {a.tool_id for a in open_rows}
    not_assigned = [str(tool_id) for tool_id in tool_ids if tool_id not in assigned_ids]
    if not_assigned:
        raise BadRequestError(
            f'Some tools are not currently assigned to this job: {", ".join(not_assigned)}'
        )

    assignment_ids = [a.id for a in open_rows]
    now = utcnow()
    result = db.session.execute(
        update(JobToTool)
        .where(JobToTool.id.in_(assignment_ids), JobToTool.returned_at.is_(None))
        .values(returned_at=now)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != len(assignment_ids):
        db.session.rollback()
        logger.warning('Concurrent return detected for job %s', job_id)
        raise ConflictError('Some tools were returned by another request')
    db.session.commit()

    returned = JobToTool.query.filter(JobToTool.id.in_(assignment_ids)).order_by(JobToTool.assigned_at).all()
    missing = open_assignments_query().filter(JobToTool.job_id == job_id).order_by(JobToTool.assigned_at).all()

    logger.info('Returned %d tools from job %s, %d still missing', len(returned), job_id, len(missing))
    return {
        'returnedTools': [a.tool.to_summary_dict() for a in returned],
        'missingTools': [a.tool.to_summary_dict() for a in missing],
        'job': {
            'jobId': str(job.job_id),
            'company': job.company,
            'finished': job.finished,
        },
        'summary': {
            'returned': len(returned),
            'missing': len(missing),
        },
    }


def assignments_query(job_id=None, tool_id=None, is_returned=None):
    """
    Filtered assignment listing, newest first

    Args:
        job_id (UUID): Only this job's assignments
        tool_id (UUID): Only this tool's assignments
        is_returned (bool): True for closed, False for open, None for both
    """
    query = JobToTool.query
    if job_id is not None:
        query = query.filter(JobToTool.job_id == job_id)
    if tool_id is not None:
        query = query.filter(JobToTool.tool_id == tool_id)
    if is_returned is True:
        query = query.filter(JobToTool.returned_at.isnot(None))
    elif is_returned is False:
        query = query.filter(JobToTool.returned_at.is_(None))
    return query.order_by(JobToTool.assigned_at.desc(), JobToTool.created_at.desc())
