# core/__init__.py
from .config import settings, get_settings
from .security import decode_token, create_id_token

__all__ = [
    "settings",
    "get_settings",
    "decode_token",
    "create_id_token",
]
