from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool, text
from alembic import context

# ============================================================
# ORDEM CORRETA: Primeiro importa os models, DEPOIS pega Base
# ============================================================

# 1. PRIMEIRO: Importa TODOS os models
from models import *

# 2. DEPOIS: Importa Base (agora com metadata populado)
from db import Base
from core.config import settings

# ============================================================

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))

# Base.metadata agora tem todas as tabelas
target_metadata = Base.metadata

# Schema do ambiente (sandbox / production)
AMBIENTE = settings.AMBIENTE


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table_schema=AMBIENTE,
        compare_type=True,
    )

    # Sem conexão não há schema_translate_map: as tabelas sem schema
    # caem no search_path, que aponta para o mesmo schema da alembic_version.
    with context.begin_transaction():
        context.execute(f'CREATE SCHEMA IF NOT EXISTS "{AMBIENTE}"')
        context.execute(f'SET search_path TO "{AMBIENTE}"')
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        if connection.dialect.name == "postgresql":
            connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{AMBIENTE}"'))
            connection.commit()
            version_schema = AMBIENTE
        else:
            version_schema = None

        connection = connection.execution_options(schema_translate_map={None: version_schema})

        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table_schema=version_schema,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
