from functools import wraps
from flask import jsonify
from flask_jwt_extended import JWTManager, create_access_token, get_jwt_identity, verify_jwt_in_request
from errors import Unauthorized

jwt = JWTManager()

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        return fn(*args, **kwargs)
    return wrapper

def current_user_id():
    return int(get_jwt_identity())

def issue_token(user):
    return create_access_token(identity=str(user['id']), additional_claims={'name': user['name']})

@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify(message='Token de acesso não fornecido.'), 401

@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify(message='Token inválido.'), 401

@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify(message=Unauthorized.default_message), 401
