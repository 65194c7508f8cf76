from flask import Blueprint, request

from tooltracker.routes.common import get_json_body, parse_tool_id_list, parse_uuid
from tooltracker.serializers import serialize_assignment_row, serialize_created_assignment
from tooltracker.services import assignments as assignment_service
from tooltracker.utils.helpers import get_pagination_args, paginate_query, parse_bool_arg
from tooltracker.utils.responses import paginated_response, success_response

assignments_bp = Blueprint('assignments', __name__)


@assignments_bp.route('', methods=['POST'])
def assign_tools():
    """
    Assign tools to a job
    POST /api/assignments
    Body: {
        "jobId": "uuid",
        "toolIds": ["uuid1", "uuid2"]
    }
    """
    job_id, tool_ids = parse_tool_id_list(get_json_body())

    created = assignment_service.assign_tools(job_id, tool_ids)

    return success_response(
        [serialize_created_assignment(a) for a in created],
        f'{len(created)} tools assigned successfully',
        201,
    )


@assignments_bp.route('/return', methods=['PUT'])
def return_tools():
    """
    Return tools from a job
    PUT /api/assignments/return
    Body: {
        "jobId": "uuid",
        "toolIds": ["uuid1", "uuid2"]
    }

    The response lists the tools still missing from the job.
    """
    job_id, tool_ids = parse_tool_id_list(get_json_body())

    result = assignment_service.return_tools(job_id, tool_ids)

    summary = result['summary']
    message = f'{summary["returned"]} tools returned successfully.'
    if summary['missing'] > 0:
        message += f' Warning: {summary["missing"]} tools still missing from this job.'
    return success_response(result, message)


@assignments_bp.route('', methods=['GET'])
def list_assignments():
    """
    List assignments
    GET /api/assignments?jobId=<uuid>&toolId=<uuid>&isReturned=false&page=1&limit=20
    """
    job_id = request.args.get('jobId')
    tool_id = request.args.get('toolId')

    query = assignment_service.assignments_query(
        job_id=parse_uuid(job_id, 'Invalid jobId filter') if job_id else None,
        tool_id=parse_uuid(tool_id, 'Invalid toolId filter') if tool_id else None,
        is_returned=parse_bool_arg(request.args.get('isReturned')),
    )

    page, limit = get_pagination_args()
    assignments, total = paginate_query(query, page, limit)

    return paginated_response([serialize_assignment_row(a) for a in assignments], page, limit, total)
