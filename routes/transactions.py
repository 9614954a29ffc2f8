import structlog
from flask import Blueprint, Response, request, jsonify, current_app
from auth_utils import login_required, current_user_id
from export import transactions_to_csv, EXPORT_FILENAME
from store import TransactionStore, serialize
from validators import validate_transaction, validate_transaction_update

transactions_bp = Blueprint('transactions', __name__, url_prefix='/api/transactions')
logger = structlog.get_logger(__name__)

def _store():
    return TransactionStore(current_app.db_pool)

@transactions_bp.route('', methods=['GET'])
@login_required
def index():
    rows = _store().list(current_user_id())
    return jsonify([serialize(row) for row in rows])


@transactions_bp.route('', methods=['POST'])
@login_required
def add_transaction():
    fields = validate_transaction(request.get_json(silent=True))
    user_id = current_user_id()
    transaction = _store().create(user_id, fields)
    logger.info("transaction_created", user_id=user_id, transaction_id=transaction['id'], type=fields['type'])
    return jsonify(serialize(transaction)), 201


@transactions_bp.route('/<int:id>', methods=['PUT'])
@login_required
def edit_transaction(id):
    user_id = current_user_id()
    store = _store()
    current = store.get(user_id, id)
    fields = validate_transaction_update(request.get_json(silent=True), current['type'])
    transaction = store.update(user_id, id, fields)
    logger.info("transaction_updated", user_id=user_id, transaction_id=id)
    return jsonify(serialize(transaction))


@transactions_bp.route('/<int:id>', methods=['DELETE'])
@login_required
def delete_transaction(id):
    user_id = current_user_id()
    _store().delete(user_id, id)
    logger.info("transaction_deleted", user_id=user_id, transaction_id=id)
    return '', 204


@transactions_bp.route('/export', methods=['GET'])
@login_required
def export_csv():
    rows = [serialize(row) for row in _store().list(current_user_id())]
    return Response(
        transactions_to_csv(rows),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={EXPORT_FILENAME}'}
    )
