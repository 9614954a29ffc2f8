from flask import Flask
from config import Config
from models import db

def init_db(app=None):
    """Create the users, transactions and goals tables if they are missing."""
    if app is None:
        app = Flask(__name__)
        app.config['SQLALCHEMY_DATABASE_URI'] = Config.sqlalchemy_uri()
    if 'sqlalchemy' not in app.extensions:
        db.init_app(app)
    with app.app_context():
        db.create_all()
    return app

if __name__ == "__main__":
    init_db()
