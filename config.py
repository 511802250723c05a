# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv()


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Device-local store for bookmarks (authoritative copy)
    LOCAL_DB_PATH = os.getenv('LOCAL_DB_PATH', os.path.join(BASE_DIR, 'bible_local.db'))

    # Remote content + annotation mirror
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_SERVICE_KEY = os.getenv('SUPABASE_SERVICE_KEY')

    JWT_SECRET = os.getenv('JWT_SECRET', 'change-me-in-production-please-0000')
    JWT_AUDIENCE = os.getenv('JWT_AUDIENCE', 'authenticated')
    JWT_EXPIRATION_HOURS = int(os.getenv('JWT_EXPIRATION_HOURS', 24))

    CROSS_BOOK_NAVIGATION = _env_flag('CROSS_BOOK_NAVIGATION')

    # Reader sessions live in process memory; idle ones are evicted
    READER_SESSION_IDLE_SECONDS = int(os.getenv('READER_SESSION_IDLE_SECONDS', 30 * 60))
    READER_SESSIONS_PER_USER = int(os.getenv('READER_SESSIONS_PER_USER', 5))

    DEFAULT_TRANSLATION = os.getenv('DEFAULT_TRANSLATION', 'TB')
    DEFAULT_LANGUAGE = os.getenv('DEFAULT_LANGUAGE', 'malay')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    PORT = int(os.getenv('PORT', 5001))
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024
