# middleware/permission.py
"""
Middleware de permissões - Verificação do papel da empresa.
"""
from fastapi import Depends, HTTPException, status

from models import PapelEmpresa
from .auth import CurrentUser, get_current_user


def require_papel_empresa(papel: PapelEmpresa):
    """
    Dependency factory que exige empresa de um papel específico.

    Uso:
        @router.post("/lotes")
        def criar(current_user: CurrentUser = Depends(require_papel_empresa(PapelEmpresa.BANHO))):
            ...
    """

    def _check_papel(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.papel_empresa != papel:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Operação restrita a empresas {papel.value}",
            )
        return current_user

    return _check_papel


require_banho = require_papel_empresa(PapelEmpresa.BANHO)
require_cliente = require_papel_empresa(PapelEmpresa.CLIENTE)
