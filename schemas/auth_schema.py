# schemas/auth_schema.py
from pydantic import BaseModel, EmailStr, Field

from models.enums import PapelEmpresa, PapelUsuario
from .empresa_schema import EmpresaOut


# ============================================================
# REGISTRO
# ============================================================

class RegistroRequest(BaseModel):
    """Cadastro da empresa e do usuário administrador."""
    razao_social: str = Field("", max_length=200)
    nome_fantasia: str = Field("", max_length=200)
    papel: PapelEmpresa = PapelEmpresa.CLIENTE
    email: EmailStr
    cnpj: str = Field("", max_length=20)
    telefone: str = Field("", max_length=30)
    endereco: str = Field("", max_length=300)


# ============================================================
# USER INFO
# ============================================================

class UsuarioOut(BaseModel):
    """Perfil do usuário."""
    id: str
    email: str
    nome: str
    empresa_id: int
    papel: PapelUsuario
    papel_empresa: PapelEmpresa

    class Config:
        from_attributes = True


class UserMe(BaseModel):
    """Usuário logado com a empresa dele."""
    usuario: UsuarioOut
    empresa: EmpresaOut
