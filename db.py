from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import settings

# ============================================================
# BASE DOS MODELOS
# ============================================================

# Os modelos não declaram schema; o namespace do ambiente
# (sandbox / production) é aplicado pelo engine.
Base = declarative_base()


# ============================================================
# CONFIGURAÇÃO DO SQLAlchemy
# ============================================================

def criar_engine(database_url: str, ambiente: Optional[str] = None, **kwargs) -> Engine:
    """
    Cria o engine do banco com o namespace do ambiente.

    Args:
        database_url: URL de conexão
        ambiente: schema onde ficam as tabelas ("sandbox", "production").
            None usa o schema padrão da conexão.
    """
    if not database_url.startswith("sqlite"):
        kwargs.setdefault("pool_pre_ping", True)  # Verifica conexão antes de usar
        kwargs.setdefault("pool_size", 10)
        kwargs.setdefault("max_overflow", 20)

    engine = create_engine(database_url, echo=False, **kwargs)
    if ambiente:
        engine = engine.execution_options(schema_translate_map={None: ambiente})
    return engine


engine = criar_engine(settings.DATABASE_URL, settings.AMBIENTE)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ============================================================
# DEPENDENCY INJECTION para FastAPI
# ============================================================

def get_db():
    """
    Cria uma sessão do banco de dados para cada requisição.
    Fecha automaticamente após o uso.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection() -> bool:
    """Testa se a conexão com o banco está funcionando"""
    try:
        with engine.connect():
            print("[OK] Conexao com o banco de dados OK!")
            return True
    except Exception as e:
        print(f"[ERRO] Erro ao conectar no banco: {e}")
        return False


if __name__ == "__main__":
    print("\n[TEST] Testando conexao com o banco...")
    test_connection()
