import os
from flask import Flask, jsonify
from flask_cors import CORS
from auth_utils import jwt
from config import Config
from errors import register_error_handlers
from logging_config import configure_logging
from routes.auth import auth_bp
from routes.dashboard import dashboard_bp
from routes.goals import goals_bp
from routes.transactions import transactions_bp

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("SECRET_KEY"):
        import secrets
        app.config["SECRET_KEY"] = secrets.token_hex(32)
    if not app.config.get("JWT_SECRET_KEY"):
        app.config["JWT_SECRET_KEY"] = app.config["SECRET_KEY"]

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'), json=app.config.get('LOG_JSON', False))
    config_class.init_db(app)

    origins = [o.strip() for o in app.config.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}})
    jwt.init_app(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(goals_bp)
    app.register_blueprint(dashboard_bp)

    @app.route('/')
    def health():
        return jsonify(message='Servidor do Controle Financeiro está no ar!')

    return app

if __name__ == "__main__":
    create_app().run(port=int(os.getenv('PORT', '3000')))
