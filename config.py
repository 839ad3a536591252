import os
from pathlib import Path

from dotenv import load_dotenv

# .env next to this file
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path)


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///visit_scheduler.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # date.weekday() numbering, 6 = Sunday
    WEEK_STARTS_ON = int(os.getenv('WEEK_STARTS_ON', '6'))
    DEFAULT_BATCH_CREATOR = os.getenv('DEFAULT_BATCH_CREATOR', 'system')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'WARNING'
