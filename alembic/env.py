import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from storefront.database import Base
from storefront import models  # noqa: F401  registers the tables on Base.metadata

config = context.config
fileConfig(config.config_file_name)

target_metadata = Base.metadata

# async drivers the app uses -> their sync counterparts for migrations
_SYNC_DRIVERS = {"+asyncpg": "", "+aiosqlite": ""}


def get_url():
    url = os.environ.get('DATABASE_URL')
    if url:
        for async_driver, sync_driver in _SYNC_DRIVERS.items():
            url = url.replace(async_driver, sync_driver)
        return url
    return config.get_main_option('sqlalchemy.url')


def run_migrations_offline():
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    configuration = config.get_section(config.config_ini_section)
    configuration['sqlalchemy.url'] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix='sqlalchemy.',
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite needs batch mode for ALTER TABLE in later revisions
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
