import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from aggregation import to_decimal
from errors import ValidationError

CATEGORIES = {
    'income': ["Salário", "Freelance", "Investimentos", "Presente", "Outros"],
    'expense': ["Moradia", "Alimentação", "Transporte", "Lazer", "Saúde", "Educação", "Contas", "Outros"],
}

TRANSACTION_TYPES = tuple(CATEGORIES)
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
CENTS = Decimal('0.01')
MAX_AMOUNT = Decimal(100000000)


def require(data, *fields):
    if not isinstance(data, dict):
        raise ValidationError()
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError()


def parse_amount(value):
    """Parse a strictly positive amount rounded to cents that fits ``Numeric(10, 2)``."""
    try:
        amount = to_decimal(value).quantize(CENTS)
    except InvalidOperation:
        raise ValidationError(f'Valor inválido: {value!r}')
    if amount <= 0:
        raise ValidationError('O valor deve ser maior que zero.')
    if amount >= MAX_AMOUNT:
        raise ValidationError(f'O valor deve ser menor que {MAX_AMOUNT}.')
    return amount


def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).split('T')[0], '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError('Data inválida. Use o formato AAAA-MM-DD.')


def parse_category(value, tx_type):
    category = str(value).strip()
    if category not in CATEGORIES[tx_type]:
        raise ValidationError(f'Categoria inválida: {category}')
    return category


def parse_description(value):
    description = str(value).strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f'A descrição deve ter no máximo {MAX_DESCRIPTION_LENGTH} caracteres.')
    return description


def validate_transaction(data):
    require(data, 'description', 'amount', 'date', 'category', 'type')
    tx_type = data['type']
    if tx_type not in TRANSACTION_TYPES:
        raise ValidationError(f'Tipo de transação inválido: {tx_type}')
    fields = validate_transaction_update(data, tx_type)
    fields['type'] = tx_type
    return fields


def validate_transaction_update(data, tx_type):
    """Validate editable fields against the transaction's stored type."""
    require(data, 'description', 'amount', 'date', 'category')
    return {
        'description': parse_description(data['description']),
        'amount': parse_amount(data['amount']),
        'date': parse_date(data['date']),
        'category': parse_category(data['category'], tx_type),
    }


def validate_goal(data):
    require(data, 'description', 'amount')
    return {
        'description': parse_description(data['description']),
        'amount': parse_amount(data['amount']),
    }


def validate_registration(data):
    require(data, 'name', 'email', 'password')
    name = str(data['name']).strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f'O nome deve ter no máximo {MAX_NAME_LENGTH} caracteres.')
    email = validate_login(data)['email']
    password = str(data['password'])
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres.')
    return {'name': name, 'email': email, 'password': password}


def validate_login(data):
    require(data, 'email', 'password')
    email = str(data['email']).strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError('E-mail inválido.')
    return {'email': email, 'password': str(data['password'])}
