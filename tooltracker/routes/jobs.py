import logging

from flask import Blueprint, request
from sqlalchemy.exc import IntegrityError

from tooltracker import db
from tooltracker.errors import BadRequestError, ConflictError
from tooltracker.models import Job
from tooltracker.routes.common import get_json_body, parse_date_arg, parse_uuid
from tooltracker.services import queries
from tooltracker.services.assignments import get_job_or_404
from tooltracker.utils.helpers import get_pagination_args, paginate_query, parse_bool_arg, parse_date
from tooltracker.utils.responses import paginated_response, success_response
from tooltracker.utils.validators import validate_company_name

logger = logging.getLogger(__name__)

jobs_bp = Blueprint('jobs', __name__)


def _check_date_order(start_date, end_date):
    if end_date is not None and end_date <= start_date:
        raise BadRequestError('End date must be after start date')


@jobs_bp.route('', methods=['GET'])
def list_jobs():
    """
    List jobs
    GET /api/jobs?finished=false&company=acme&startDate=2024-01-01&page=1&limit=20
    """
    query = Job.query

    # Apply filters
    finished = parse_bool_arg(request.args.get('finished'))
    if finished is not None:
        query = query.filter(Job.finished.is_(finished))

    company = request.args.get('company')
    if company:
        query = query.filter(Job.company.icontains(company, autoescape=True))

    start_date = parse_date_arg('startDate')
    if start_date:
        query = query.filter(Job.start_date >= start_date)

    end_date = parse_date_arg('endDate')
    if end_date:
        query = query.filter(Job.end_date <= end_date)

    query = query.order_by(Job.created_at.desc(), Job.job_id)

    page, limit = get_pagination_args()
    jobs, total = paginate_query(query, page, limit)

    return paginated_response([job.to_dict() for job in jobs], page, limit, total)


@jobs_bp.route('', methods=['POST'])
def create_job():
    """
    Create a job
    POST /api/jobs
    Body: {
        "company": "Acme",
        "startDate": "2024-01-01",
        "endDate": "2024-02-01"
    }
    """
    data = get_json_body()

    company = data.get('company')
    if not validate_company_name(company):
        raise BadRequestError('Company name is required and must be valid')

    start_date = parse_date(data.get('startDate'))
    if start_date is None:
        raise BadRequestError('Valid start date is required')

    end_date = None
    if data.get('endDate'):
        end_date = parse_date(data['endDate'])
        if end_date is None:
            raise BadRequestError('End date must be valid if provided')

    _check_date_order(start_date, end_date)

    job = Job(
        company=company.strip(),
        start_date=start_date,
        end_date=end_date,
        finished=False,
    )
    db.session.add(job)
    db.session.commit()

    logger.info('Created job %s for %s', job.job_id, job.company)
    return success_response(job.to_dict(), 'Job created successfully', 201)


@jobs_bp.route('/<job_id>', methods=['GET'])
def get_job(job_id):
    job = get_job_or_404(parse_uuid(job_id))
    return success_response(job.to_dict())


@jobs_bp.route('/<job_id>', methods=['PUT'])
def update_job(job_id):
    """
    Update a job
    PUT /api/jobs/<job_id>
    Body: any of company, startDate, endDate (null clears it), finished
    """
    job_uuid = parse_uuid(job_id)
    data = get_json_body()

    updates = {}
    if 'company' in data:
        if not validate_company_name(data['company']):
            raise BadRequestError('Company name must be valid')
        updates['company'] = data['company'].strip()

    if 'startDate' in data:
        start_date = parse_date(data['startDate'])
        if start_date is None:
            raise BadRequestError('Start date must be valid')
        updates['start_date'] = start_date

    if 'endDate' in data:
        if data['endDate'] is None:
            updates['end_date'] = None
        else:
            end_date = parse_date(data['endDate'])
            if end_date is None:
                raise BadRequestError('End date must be valid')
            updates['end_date'] = end_date

    if 'finished' in data:
        if not isinstance(data['finished'], bool):
            raise BadRequestError('Finished must be true or false')
        updates['finished'] = data['finished']

    if not updates:
        raise BadRequestError('No valid fields to update')

    job = get_job_or_404(job_uuid)
    _check_date_order(
        updates.get('start_date', job.start_date),
        updates.get('end_date', job.end_date),
    )

    was_finished = job.finished
    for field, value in updates.items():
        setattr(job, field, value)
    db.session.commit()

    if job.finished and not was_finished:
        logger.info('Job %s marked finished', job.job_id)
    return success_response(job.to_dict(), 'Job updated successfully')


@jobs_bp.route('/<job_id>', methods=['DELETE'])
def delete_job(job_id):
    """
    Delete a job that never had tools assigned
    DELETE /api/jobs/<job_id>
    """
    job = get_job_or_404(parse_uuid(job_id))

    if job.has_assignment_history():
        raise ConflictError('Cannot delete job with tool assignments. Mark as finished instead.')

    db.session.delete(job)
    try:
        db.session.commit()
    except IntegrityError:
        # An assignment was created between the check and the delete
        db.session.rollback()
        raise ConflictError('Cannot delete job with tool assignments. Mark as finished instead.')

    logger.info('Deleted job %s', job_id)
    return success_response(None, 'Job deleted successfully')


@jobs_bp.route('/<job_id>/tools', methods=['GET'])
def list_job_tools(job_id):
    """
    Every tool ever assigned to a job with its return status
    GET /api/jobs/<job_id>/tools
    """
    job = get_job_or_404(parse_uuid(job_id))
    result = queries.job_tools(job)
    return success_response(result, f'Found {result["summary"]["total"]} tools for job')


@jobs_bp.route('/<job_id>/missing-tools', methods=['GET'])
def list_job_missing_tools(job_id):
    """
    Tools still out with a job
    GET /api/jobs/<job_id>/missing-tools
    """
    job = get_job_or_404(parse_uuid(job_id))
    result = queries.missing_tools_for_job(job)

    count = result['count']
    if count == 0:
        message = 'All tools have been returned for this job'
    else:
        message = f'{count} tools are still missing from this job'
    return success_response(result, message)
