"""
Error taxonomy shared by the API and the client.

Every error carries a user-facing ``message`` and the HTTP status the API
answers with. The client maps responses back onto the same classes.
"""

import mysql.connector
import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger(__name__)

GENERIC_ERROR = 'Ocorreu um erro na requisição.'


class FinanceError(Exception):
    status_code = 500
    default_message = GENERIC_ERROR

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FinanceError):
    status_code = 400
    default_message = 'Por favor, preencha todos os campos obrigatórios.'


class Unauthorized(FinanceError):
    status_code = 401
    default_message = 'Sua sessão expirou. Por favor, faça login novamente.'


class NotFound(FinanceError):
    status_code = 404
    default_message = 'Registro não encontrado.'


class ServerError(FinanceError):
    status_code = 500


class NetworkUnreachable(FinanceError):
    status_code = None
    default_message = 'Não foi possível conectar ao servidor. Verifique se ele está rodando.'


def error_for_status(status_code, message=None):
    """Pick the error class matching an HTTP status."""
    for cls in (ValidationError, Unauthorized, NotFound):
        if cls.status_code == status_code:
            return cls(message)
    return ServerError(message)


def register_error_handlers(app):
    @app.errorhandler(FinanceError)
    def handle_finance_error(error):
        return jsonify(message=error.message), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify(message=error.description), error.code

    @app.errorhandler(mysql.connector.Error)
    def handle_db_error(error):
        logger.exception("database_error", errno=getattr(error, 'errno', None))
        return jsonify(message=GENERIC_ERROR), 500
