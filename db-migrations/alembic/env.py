from logging.config import fileConfig
from alembic import context
import logging
from dotenv import load_dotenv
import os
import sys
from sqlalchemy import create_engine
from sqlalchemy import pool

# The project root holds database.py and the models package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

default_dotenv_path = '../.env'
dotenv_path = default_dotenv_path
db_url_override = None

# Use Alembic's x-arguments
for x_arg in context.get_x_argument(as_dictionary=False):
    print(f"x_arg = [{x_arg.split('=', 1)[0]}]")
    if x_arg.lower().strip().startswith('db-url='):
        db_url_override = x_arg.split('=', 1)[1].strip()
    elif x_arg.lower().strip().startswith('dotenv-path='):
        dotenv_path = x_arg.split('=', 1)[1].strip()
    else:
        print(f"ERROR: Unrecognized Alembic -x argument: '{x_arg}' Valid arguments are: db-url, dotenv-path", file=sys.stderr)
        sys.exit(1)

load_dotenv(dotenv_path=dotenv_path)

from database import Base  # noqa: E402  import after the env file is loaded
import models  # noqa: E402,F401  registers every table on Base.metadata

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

log = logging.getLogger('alembic.env')


def _db_url() -> str:
    url = db_url_override or os.getenv("DATABASE_URL")
    if not url:
        print("ERROR: DATABASE_URL is not set and no -x db-url was given", file=sys.stderr)
        sys.exit(1)
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL to the script output instead of executing it, so no DBAPI
    connection is needed.
    """
    context.configure(
        url=_db_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    db_url = _db_url()
    connectable = create_engine(db_url, poolclass=pool.NullPool)
    log.info(f"Connection dialect: {connectable.dialect.name}")

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connectable.dialect.name == "sqlite",
        )

        log.info("Starting migrations...")
        try:
            with context.begin_transaction():
                context.run_migrations()
            log.info("Migrations completed successfully - transaction committed")
        except Exception as e:
            log.error(f"Migration failed with error: {e}", exc_info=True)
            raise


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
