import os
from datetime import timedelta
import mysql.connector
from mysql.connector import pooling
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_EXPIRES_HOURS', '1')))
    MYSQL_HOST = os.getenv('MYSQL_HOST')
    MYSQL_USER = os.getenv('MYSQL_USER')
    MYSQL_PASSWORD = os.getenv('MYSQL_PASSWORD')
    MYSQL_DATABASE = os.getenv('MYSQL_DATABASE', 'finance_db')
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', '5'))
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_JSON = os.getenv('LOG_JSON', '').lower() in ('1', 'true', 'yes')

    @staticmethod
    def sqlalchemy_uri():
        return (
            f"mysql+mysqlconnector://{Config.MYSQL_USER}:{Config.MYSQL_PASSWORD}"
            f"@{Config.MYSQL_HOST}/{Config.MYSQL_DATABASE}"
        )

    @staticmethod
    def init_db(app):
        app.db_pool = mysql.connector.pooling.MySQLConnectionPool(
            pool_name="finance_pool",
            pool_size=Config.DB_POOL_SIZE,
            host=Config.MYSQL_HOST,
            user=Config.MYSQL_USER,
            password=Config.MYSQL_PASSWORD,
            database=Config.MYSQL_DATABASE
        )
