from flask import Blueprint

from tooltracker.errors import BadRequestError
from tooltracker.routes.common import parse_uuid
from tooltracker.services import queries
from tooltracker.services.assignments import get_job_or_404, get_tool_or_404
from tooltracker.utils.responses import success_response

queries_bp = Blueprint('queries', __name__)


@queries_bp.route('/missing-tools', methods=['GET'])
def missing_tools():
    """All tools currently out, with days since they were assigned"""
    result = queries.all_missing_tools()
    count = result['count']
    message = 'No missing tools found' if count == 0 else f'Found {count} missing tools'
    return success_response(result, message)


@queries_bp.route('/overdue-returns', methods=['GET'])
def overdue_returns():
    """Tools still out with finished jobs past their end date"""
    result = queries.overdue_returns()
    count = result['count']
    message = 'No overdue tool returns found' if count == 0 else f'Found {count} overdue tool returns'
    return success_response(result, message)


@queries_bp.route('/tool-usage-stats', methods=['GET'])
def tool_usage_stats():
    result = queries.tool_usage_stats()
    return success_response(result, f'Tool usage statistics for {result["summary"]["totalTools"]} tools')


@queries_bp.route('/company-tools/<path:company>', methods=['GET'])
def company_tools(company):
    """Current and past assignments for jobs of a company (substring match)"""
    company = company.strip()
    if not company:
        raise BadRequestError('Company name is required')

    result = queries.company_tools(company)
    total = result['summary']['totalAssignments']
    return success_response(result, f'Found {total} tool assignments for {company}')


@queries_bp.route('/job-history/<tool_id>', methods=['GET'])
def job_history(tool_id):
    tool = get_tool_or_404(parse_uuid(tool_id))
    result = queries.job_history(tool)
    return success_response(result, f'Found {len(result["history"])} assignments for tool')


@queries_bp.route('/tools-by-job/<job_id>', methods=['GET'])
def tools_by_job(job_id):
    job = get_job_or_404(parse_uuid(job_id))
    result = queries.tools_by_job(job)
    return success_response(result, f'Found {len(result["tools"])} tools for job')


@queries_bp.route('/currently-assigned', methods=['GET'])
def currently_assigned():
    result = queries.currently_assigned_tools()
    return success_response(result, f'Found {result["count"]} tools currently assigned')


@queries_bp.route('/tool-counts-by-type', methods=['GET'])
def tool_counts_by_type():
    counts = queries.tool_counts_by_type()
    return success_response(counts, f'Found {len(counts)} tool types')
