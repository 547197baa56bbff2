# models/tipos.py
from sqlalchemy import JSON, Enum, Numeric
from sqlalchemy.dialects.postgresql import JSONB

# JSONB no PostgreSQL, JSON genérico nos demais dialetos
JsonDocumento = JSON().with_variant(JSONB(), "postgresql")

# Numeric sem precisão fixa: sem arredondamento implícito nos valores monetários
Monetario = Numeric(asdecimal=True)


def EnumTexto(enum_cls):
    """Enum gravado pelo value em coluna texto, sem tipo nativo no banco."""
    return Enum(
        enum_cls,
        native_enum=False,
        length=30,
        values_callable=lambda e: [m.value for m in e],
    )
