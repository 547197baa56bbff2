# models/__init__.py
"""
Importações dos modelos em ordem correta para evitar problemas de relacionamento.

ORDEM IMPORTANTE:
1. Base (do db.py)
2. Empresa e os registros 1:1 dela (Assinatura, Faturamento)
3. Usuario (FK para empresa)
4. Lote e Peca
5. Registros de eventos
"""

# Importa Base do db.py
from db import Base

from .enums import (
    PapelEmpresa,
    PapelUsuario,
    StatusLote,
    StatusAssinatura,
    LayoutEtiqueta,
)

# 1. Empresa
from .empresa import Empresa
from .assinatura import Assinatura
from .faturamento import Faturamento

# 2. Usuário
from .usuario import Usuario

# 3. Lotes e peças
from .lote import Lote
from .peca import Peca

# 4. Eventos
from .evento import Evento, TipoEvento
from .evento_webhook import EventoWebhook

__all__ = [
    "Base",
    # Enums
    "PapelEmpresa",
    "PapelUsuario",
    "StatusLote",
    "StatusAssinatura",
    "LayoutEtiqueta",
    # Cadastro
    "Empresa",
    "Assinatura",
    "Faturamento",
    "Usuario",
    # Operação
    "Lote",
    "Peca",
    # Eventos
    "Evento",
    "TipoEvento",
    "EventoWebhook",
]
