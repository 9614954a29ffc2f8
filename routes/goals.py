import structlog
from flask import Blueprint, request, jsonify, current_app
from auth_utils import login_required, current_user_id
from store import GoalStore, serialize
from validators import validate_goal

goals_bp = Blueprint('goals', __name__, url_prefix='/api/goals')
logger = structlog.get_logger(__name__)

@goals_bp.route('', methods=['GET'])
@login_required
def index():
    rows = GoalStore(current_app.db_pool).list(current_user_id())
    return jsonify([serialize(row) for row in rows])


@goals_bp.route('', methods=['POST'])
@login_required
def add_goal():
    fields = validate_goal(request.get_json(silent=True))
    user_id = current_user_id()
    goal = GoalStore(current_app.db_pool).create(user_id, fields)
    logger.info("goal_created", user_id=user_id, goal_id=goal['id'])
    return jsonify(serialize(goal)), 201


@goals_bp.route('/<int:id>', methods=['DELETE'])
@login_required
def delete_goal(id):
    user_id = current_user_id()
    GoalStore(current_app.db_pool).delete(user_id, id)
    logger.info("goal_deleted", user_id=user_id, goal_id=id)
    return '', 204
