#!/usr/bin/env python

"""
    Configurations for Circulate

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import os


# Determine environment
TESTING = os.getenv("TESTING", "false").lower() == "true"

# API server configuration
HOST = os.environ.get('CIRCULATE_HOST', 'localhost')
PORT = int(os.environ.get('CIRCULATE_PORT', 8080))
WORKERS = int(os.environ.get('CIRCULATE_WORKERS', 1))
DEBUG = bool(int(os.environ.get('CIRCULATE_DEBUG', 0)))
LOG_LEVEL = os.environ.get('CIRCULATE_LOG_LEVEL', 'info')
SSL_CRT = os.environ.get('CIRCULATE_SSL_CRT')
SSL_KEY = os.environ.get('CIRCULATE_SSL_KEY')
CORS_ORIGINS = [
    origin.strip() for origin in
    os.environ.get('CIRCULATE_CORS_ORIGINS', 'http://localhost:3000').split(',')
    if origin.strip()
]
CIRCULATE_HTTP_HEADERS = {"User-Agent": "CirculateClient/1.0"}

OPTIONS = {
    'host': HOST,
    'port': PORT,
    'log_level': LOG_LEVEL,
    'reload': DEBUG,
    'workers': WORKERS,
}
if SSL_CRT and SSL_KEY:
    OPTIONS['ssl_keyfile'] = SSL_KEY
    OPTIONS['ssl_certfile'] = SSL_CRT

# Session tokens
SECRET = os.environ.get('CIRCULATE_SECRET', 'circulate-dev-secret' if TESTING else None)
TOKEN_TTL_MINUTES = int(os.environ.get('CIRCULATE_TOKEN_TTL_MINUTES', 60))

# Lending policy
LOAN_DAYS = int(os.environ.get('CIRCULATE_LOAN_DAYS', 15))
LATE_FINE = int(os.environ.get('CIRCULATE_LATE_FINE', 100))

DB_CONFIG = {
    'user': os.environ.get('DB_USER', 'postgres'),
    'password': os.environ.get('DB_PASSWORD'),
    'host': os.environ.get('DB_HOST', 'localhost'),
    'port': int(os.environ.get('DB_PORT', '5432')),
    'dbname': os.environ.get('DB_NAME', 'circulate'),
}

# Seconds to wait on the store (pool checkout, sqlite busy lock) before giving up
DB_TIMEOUT = float(os.environ.get('CIRCULATE_DB_TIMEOUT', 10))

# Database configuration
DB_URI = os.environ.get('CIRCULATE_DB_URI') or (
    "sqlite:///:memory:" if TESTING else
    'postgresql+psycopg2://{user}:{password}@{host}:{port}/{dbname}'.format(**DB_CONFIG)
)

__all__ = [
    'HOST', 'PORT', 'DEBUG', 'OPTIONS', 'LOG_LEVEL', 'CORS_ORIGINS',
    'SECRET', 'TOKEN_TTL_MINUTES', 'LOAN_DAYS', 'LATE_FINE',
    'DB_URI', 'DB_CONFIG', 'DB_TIMEOUT', 'TESTING',
]
