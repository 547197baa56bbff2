from .auth import CurrentUser, get_current_user, get_token_payload
from .permission import require_papel_empresa, require_banho, require_cliente

__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_token_payload",
    "require_papel_empresa",
    "require_banho",
    "require_cliente",
]
