# models/enums.py
import enum


class PapelEmpresa(str, enum.Enum):
    """Papel da empresa na plataforma."""
    BANHO = "banho"      # prestador do serviço de banho
    CLIENTE = "cliente"


class PapelUsuario(str, enum.Enum):
    """Papel do usuário dentro da empresa."""
    ADMIN = "admin"
    OPERATIONAL = "operational"
    VIEWER = "viewer"


class StatusLote(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    FINISHED = "finished"
    DELIVERED = "delivered"


class StatusAssinatura(str, enum.Enum):
    PAYMENT_PENDING = "payment_pending"
    TRIAL = "trial"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class LayoutEtiqueta(str, enum.Enum):
    A4 = "A4"
    COMPACT = "COMPACT"
    THERMAL = "THERMAL"
