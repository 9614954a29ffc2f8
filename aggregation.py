"""
Aggregations over a user's transactions.

All functions are pure: they take already owner-scoped records (mappings with
``type``, ``amount``, ``category`` and ``date``) and return plain dicts and
lists ready to be serialized or handed to a chart.
"""

from datetime import date
from decimal import Decimal, InvalidOperation

from errors import ValidationError

MONTH_ABBREVIATIONS = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]
ZERO = Decimal('0')


def to_decimal(value):
    """Parse an amount, rejecting anything that is not a finite number."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f'Valor inválido: {value!r}')
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f'Valor inválido: {value!r}')
    if not amount.is_finite():
        raise ValidationError(f'Valor inválido: {value!r}')
    return amount


def clamp(value, min_val=0, max_val=100):
    return max(min(float(value), max_val), min_val)


def _year_month(value):
    if isinstance(value, date):
        return value.year, value.month
    text = str(value)
    try:
        year, month = int(text[0:4]), int(text[5:7])
    except ValueError:
        raise ValidationError(f'Data inválida: {value!r}')
    if not 1 <= month <= 12:
        raise ValidationError(f'Data inválida: {value!r}')
    return year, month


def _total(transactions, tx_type):
    return sum((to_decimal(t['amount']) for t in transactions if t['type'] == tx_type), ZERO)


def balance_summary(transactions):
    income = _total(transactions, 'income')
    expenses = _total(transactions, 'expense')
    return {'income': income, 'expenses': expenses, 'balance': income - expenses}


def monthly_series(transactions):
    """Income and expenses per (year, month), oldest month first."""
    buckets = {}
    for t in transactions:
        bucket = buckets.setdefault(_year_month(t['date']), {'income': ZERO, 'expense': ZERO})
        bucket[t['type']] += to_decimal(t['amount'])

    keys = sorted(buckets)
    return {
        'labels': [f"{MONTH_ABBREVIATIONS[month - 1]}/{year}" for year, month in keys],
        'income': [buckets[key]['income'] for key in keys],
        'expenses': [buckets[key]['expense'] for key in keys],
    }


def category_series(transactions):
    """Expense totals per category, in the order categories first appear."""
    totals = {}
    for t in transactions:
        if t['type'] == 'expense':
            totals[t['category']] = totals.get(t['category'], ZERO) + to_decimal(t['amount'])
    return {'labels': list(totals), 'values': list(totals.values())}


def goal_progress(balance, target):
    target = to_decimal(target)
    if target <= 0:
        raise ValidationError('O valor da meta deve ser maior que zero.')
    return clamp(to_decimal(balance) / target * 100)


def goal_card(goal, balance):
    """
    Goal fields plus ``progress`` and ``saved``.

    A stored goal whose target is not positive gets a progress of 0.
    """
    card = dict(goal)
    if to_decimal(goal['amount']) > 0:
        card['progress'] = goal_progress(balance, goal['amount'])
    else:
        card['progress'] = 0.0
    card['saved'] = max(to_decimal(balance), ZERO)
    return card


def goal_cards(goals, transactions):
    balance = balance_summary(transactions)['balance']
    return [goal_card(goal, balance) for goal in goals]
