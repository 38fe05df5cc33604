"""
alembic/env.py

Migrations for the database cache backend (CACHE_BACKEND=database).

Target URL priority:
1) `-x db_url=...` for one-off targets
2) ALEMBIC_DATABASE_URL
3) the runtime resolution in db.config (DATABASE_URL, CLOUD_DATABASE_URL,
   LOCAL_DATABASE_URL)
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from db.base import Base
from db.config import load_env_files, normalize_postgres_url, resolve_database_url
from db.models import CacheSnapshot  # noqa: F401  imports register the table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _cache_database_url() -> str:
    load_env_files()

    override = context.get_x_argument(as_dictionary=True).get("db_url")
    if override:
        return normalize_postgres_url(override)

    alembic_url = os.getenv("ALEMBIC_DATABASE_URL", "").strip()
    if alembic_url:
        return normalize_postgres_url(alembic_url)

    return resolve_database_url()


def run_migrations_offline() -> None:
    context.configure(
        url=_cache_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _cache_database_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
