import os

import psycopg2


def database_dsn() -> str:
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required to connect to Postgres")
    dsn = database_url.replace("postgresql+psycopg2://", "postgresql://", 1)
    return dsn.replace("postgresql+psycopg://", "postgresql://", 1)


def get_connection():
    return psycopg2.connect(database_dsn())
