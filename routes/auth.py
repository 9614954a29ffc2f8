import structlog
from flask import Blueprint, request, jsonify, current_app
from werkzeug.security import generate_password_hash, check_password_hash
from auth_utils import issue_token
from errors import Unauthorized, ValidationError
from store import UserStore
from validators import validate_registration, validate_login

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')
logger = structlog.get_logger(__name__)

def _public(user):
    return {'id': user['id'], 'name': user['name'], 'email': user['email']}

@auth_bp.route('/register', methods=['POST'])
def register():
    fields = validate_registration(request.get_json(silent=True))
    users = UserStore(current_app.db_pool)

    if users.find_by_email(fields['email']):
        raise ValidationError('Este e-mail já está cadastrado.')

    user = users.create(fields['name'], fields['email'], generate_password_hash(fields['password']))
    logger.info("user_registered", user_id=user['id'])

    return jsonify(
        token=issue_token(user),
        user=_public(user),
        message='Cadastro realizado com sucesso!'
    ), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    fields = validate_login(request.get_json(silent=True))
    user = UserStore(current_app.db_pool).find_by_email(fields['email'])

    if not user or not check_password_hash(user['password_hash'], fields['password']):
        logger.info("login_failed", email=fields['email'])
        raise Unauthorized('E-mail ou senha inválidos.')

    logger.info("login_succeeded", user_id=user['id'])
    return jsonify(
        token=issue_token(user),
        user=_public(user),
        message='Login realizado com sucesso!'
    )
