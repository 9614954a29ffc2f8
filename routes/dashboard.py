from flask import Blueprint, jsonify, current_app
from aggregation import balance_summary, monthly_series, category_series, goal_cards
from auth_utils import login_required, current_user_id
from store import TransactionStore, GoalStore, serialize

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')

@dashboard_bp.route('', methods=['GET'])
@login_required
def index():
    user_id = current_user_id()
    transactions = TransactionStore(current_app.db_pool).list(user_id)
    goals = GoalStore(current_app.db_pool).list(user_id)

    # Bar chart (monthly) and pie chart (category-wise)
    monthly = monthly_series(transactions)
    categories = category_series(transactions)

    return jsonify(
        summary=serialize(balance_summary(transactions)),
        monthly={
            'labels': monthly['labels'],
            'income': [float(v) for v in monthly['income']],
            'expenses': [float(v) for v in monthly['expenses']],
        },
        categories={
            'labels': categories['labels'],
            'values': [float(v) for v in categories['values']],
        },
        goals=[serialize(card) for card in goal_cards(goals, transactions)]
    )
