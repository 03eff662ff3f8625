from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from configs import Config, db
from db.models import *  # noqa: F401,F403  metadata semua model

config = context.config

# DATABASE_URL (.env) menimpa sqlalchemy.url di alembic.ini
config.set_main_option("sqlalchemy.url", Config.SQLALCHEMY_DATABASE_URI)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = db.metadata

COMPARE_KW = dict(
    compare_type=True,
    compare_server_default=True,
    render_as_batch=Config.SQLALCHEMY_DATABASE_URI.startswith("sqlite"),
)


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_KW
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata, **COMPARE_KW
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
