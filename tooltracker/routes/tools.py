import logging

from flask import Blueprint, request
from sqlalchemy.exc import IntegrityError

from tooltracker import db
from tooltracker.errors import BadRequestError, ConflictError, NotFoundError, TOOL_ALREADY_EXISTS, TOOL_NOT_FOUND
from tooltracker.models import Tool, JobToTool
from tooltracker.routes.common import get_json_body, parse_uuid
from tooltracker.serializers import serialize_tool_detail, serialize_tool_with_current_job
from tooltracker.services import queries
from tooltracker.services.assignments import get_tool_or_404
from tooltracker.utils.helpers import get_pagination_args, paginate_query, parse_bool_arg
from tooltracker.utils.responses import paginated_response, success_response
from tooltracker.utils.validators import validate_tin, validate_tool_type

logger = logging.getLogger(__name__)

tools_bp = Blueprint('tools', __name__)


@tools_bp.route('', methods=['GET'])
def list_tools():
    """
    List tools
    GET /api/tools?toolType=drill&tin=ABC&isAssigned=true&jobId=<uuid>&page=1&limit=20
    """
    query = Tool.query

    tool_type = request.args.get('toolType')
    if tool_type:
        query = query.filter(Tool.tool_type.icontains(tool_type, autoescape=True))

    tin = request.args.get('tin')
    if tin:
        query = query.filter(Tool.tin.icontains(tin, autoescape=True))

    is_assigned = parse_bool_arg(request.args.get('isAssigned'))
    if is_assigned is True:
        query = query.filter(queries.tool_is_out_clause())
    elif is_assigned is False:
        query = query.filter(~queries.tool_is_out_clause())

    job_id = request.args.get('jobId')
    if job_id:
        query = query.filter(queries.tool_is_out_clause(parse_uuid(job_id, 'Invalid jobId filter')))

    query = query.order_by(Tool.created_at.desc(), Tool.tool_id)

    page, limit = get_pagination_args()
    tools, total = paginate_query(query, page, limit)

    return paginated_response([tool.to_dict() for tool in tools], page, limit, total)


@tools_bp.route('', methods=['POST'])
def create_tool():
    """
    Register a newly scanned tool
    POST /api/tools
    Body: {"tin": "ABC123", "toolType": "Drill"}
    """
    data = get_json_body()

    tin = data.get('tin')
    if not validate_tin(tin):
        raise BadRequestError('Tool identification number (TIN) is required and must be valid')

    tool_type = data.get('toolType')
    if not validate_tool_type(tool_type):
        raise BadRequestError('Tool type is required and must be valid')

    tin = tin.strip()
    if Tool.query.filter_by(tin=tin).first():
        raise ConflictError(TOOL_ALREADY_EXISTS)

    tool = Tool(tin=tin, tool_type=tool_type.strip())
    db.session.add(tool)
    try:
        db.session.commit()
    except IntegrityError:
        # Same TIN registered concurrently
        db.session.rollback()
        raise ConflictError(TOOL_ALREADY_EXISTS)

    logger.info('Created tool %s (%s)', tool.tin, tool.tool_type)
    return success_response(tool.to_dict(), 'Tool created successfully', 201)


@tools_bp.route('/available', methods=['GET'])
def list_available_tools():
    """
    Tools not currently out with any job
    GET /api/tools/available
    """
    tools = queries.available_tools()
    return success_response([tool.to_dict() for tool in tools], f'Found {len(tools)} available tools')


@tools_bp.route('/by-tin/<path:tin>', methods=['GET'])
def get_tool_by_tin(tin):
    """
    Look up a scanned barcode
    GET /api/tools/by-tin/<tin>
    """
    if not validate_tin(tin):
        raise BadRequestError('Invalid tool identification number')

    tool = Tool.query.filter_by(tin=tin.strip()).first()
    if tool is None:
        raise NotFoundError(TOOL_NOT_FOUND)

    return success_response(serialize_tool_with_current_job(tool, tool.current_assignment()))


@tools_bp.route('/<tool_id>', methods=['GET'])
def get_tool(tool_id):
    """
    Tool with its job history
    GET /api/tools/<tool_id>
    """
    tool = get_tool_or_404(parse_uuid(tool_id))
    assignments = tool.assignments.order_by(JobToTool.assigned_at.desc(), JobToTool.id).all()
    return success_response(serialize_tool_detail(tool, assignments))


@tools_bp.route('/<tool_id>', methods=['PUT'])
def update_tool(tool_id):
    """
    Update a tool
    PUT /api/tools/<tool_id>
    Body: {"toolType": "Impact Driver"}

    The TIN is the scanned identity of the tool and cannot be changed.
    """
    tool_uuid = parse_uuid(tool_id)
    data = get_json_body()

    updates = {}
    if 'toolType' in data:
        if not validate_tool_type(data['toolType']):
            raise BadRequestError('Tool type must be valid')
        updates['tool_type'] = data['toolType'].strip()

    if not updates:
        raise BadRequestError('No valid fields to update')

    tool = get_tool_or_404(tool_uuid)
    for field, value in updates.items():
        setattr(tool, field, value)
    db.session.commit()

    return success_response(tool.to_dict(), 'Tool updated successfully')


@tools_bp.route('/<tool_id>', methods=['DELETE'])
def delete_tool(tool_id):
    """
    Delete a tool that was never assigned
    DELETE /api/tools/<tool_id>
    """
    tool = get_tool_or_404(parse_uuid(tool_id))

    if tool.has_assignment_history():
        raise ConflictError('Cannot delete tool that has been assigned to jobs')

    db.session.delete(tool)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Cannot delete tool that has been assigned to jobs')

    logger.info('Deleted tool %s', tool_id)
    return success_response(None, 'Tool deleted successfully')
