"""create xtagy tables

Revision ID: c3d4e5f6a7b8
Revises:
Create Date: 2026-10-19 09:00:00.000000

As tabelas são criadas sem schema explícito; o env.py aplica o
schema do ambiente (sandbox / production) via schema_translate_map.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'c3d4e5f6a7b8'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_DOC = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade() -> None:
    """Upgrade schema - empresas, usuários, lotes, peças e billing."""

    # Empresas
    op.create_table(
        'empresa',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('razao_social', sa.String(length=200), nullable=False),
        sa.Column('nome_fantasia', sa.String(length=200), nullable=False),
        sa.Column('papel', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('cnpj', sa.String(length=20), nullable=False),
        sa.Column('telefone', sa.String(length=30), nullable=False),
        sa.Column('endereco', sa.String(length=300), nullable=False),
        sa.Column('logo', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_empresa_id', 'empresa', ['id'])
    op.create_index('ix_empresa_papel', 'empresa', ['papel'])

    # Assinatura (somente banho)
    op.create_table(
        'assinatura',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('empresa_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('plano', sa.String(length=50), nullable=False),
        sa.Column('stripe_customer_id', sa.String(length=100), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(length=100), nullable=True),
        sa.Column('trial_iniciado_em', sa.DateTime(timezone=True), nullable=True),
        sa.Column('trial_termina_em', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresa.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_assinatura_id', 'assinatura', ['id'])
    op.create_index('ix_assinatura_empresa_id', 'assinatura', ['empresa_id'], unique=True)
    op.create_index('ix_assinatura_status', 'assinatura', ['status'])
    op.create_index('ix_assinatura_stripe_customer_id', 'assinatura', ['stripe_customer_id'])

    # Último pagamento confirmado
    op.create_table(
        'faturamento',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('empresa_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('modo', sa.String(length=20), nullable=False),
        sa.Column('provedor', sa.String(length=30), nullable=False),
        sa.Column('transacao_id', sa.String(length=100), nullable=False),
        sa.Column('valor', sa.Numeric(), nullable=False),
        sa.Column('pago_em', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresa.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_faturamento_id', 'faturamento', ['id'])
    op.create_index('ix_faturamento_empresa_id', 'faturamento', ['empresa_id'], unique=True)

    # Usuários (id = uid do provedor de identidade)
    op.create_table(
        'usuario',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('nome', sa.String(length=255), nullable=False),
        sa.Column('empresa_id', sa.Integer(), nullable=False),
        sa.Column('papel', sa.String(length=30), nullable=False),
        sa.Column('papel_empresa', sa.String(length=30), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresa.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_usuario_email', 'usuario', ['email'])
    op.create_index('ix_usuario_empresa_id', 'usuario', ['empresa_id'])

    # Lotes
    op.create_table(
        'lote',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('empresa_banho_id', sa.Integer(), nullable=False),
        sa.Column('empresa_cliente_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('cotacao_ouro', sa.Numeric(), nullable=False),
        sa.Column('camadas', sa.Numeric(), nullable=False),
        sa.Column('mao_de_obra', sa.Numeric(), nullable=False),
        sa.Column('margem_padrao', sa.Numeric(), nullable=False),
        sa.Column('codigo_acesso', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['empresa_banho_id'], ['empresa.id']),
        sa.ForeignKeyConstraint(['empresa_cliente_id'], ['empresa.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lote_id', 'lote', ['id'])
    op.create_index('ix_lote_empresa_banho_id', 'lote', ['empresa_banho_id'])
    op.create_index('ix_lote_empresa_cliente_id', 'lote', ['empresa_cliente_id'])
    op.create_index('ix_lote_status', 'lote', ['status'])
    op.create_index('ix_lote_codigo_acesso', 'lote', ['codigo_acesso'], unique=True)

    # Peças
    op.create_table(
        'peca',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lote_id', sa.Integer(), nullable=False),
        sa.Column('foto', sa.Text(), nullable=False),
        sa.Column('codigo_interno', sa.String(length=100), nullable=False),
        sa.Column('tipo', sa.String(length=100), nullable=False),
        sa.Column('peso_peca', sa.Numeric(), nullable=False),
        sa.Column('valor_peca_bruta', sa.Numeric(), nullable=False),
        sa.Column('camadas', sa.Numeric(), nullable=False),
        sa.Column('mao_de_obra', sa.Numeric(), nullable=False),
        sa.Column('cotacao_ouro_dia', sa.Numeric(), nullable=False),
        sa.Column('calculo_metal', sa.Numeric(), nullable=False),
        sa.Column('custo_final_cliente', sa.Numeric(), nullable=False),
        sa.Column('preco_sugerido', sa.Numeric(), nullable=False),
        sa.Column('etiqueta', JSON_DOC, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['lote_id'], ['lote.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_peca_id', 'peca', ['id'])
    op.create_index('ix_peca_lote_id', 'peca', ['lote_id'])

    # Eventos operacionais
    op.create_table(
        'evento',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), autoincrement=True, nullable=False),
        sa.Column('tipo', sa.String(length=50), nullable=False),
        sa.Column('empresa_id', sa.Integer(), nullable=True),
        sa.Column('papel_empresa', sa.String(length=30), nullable=True),
        sa.Column('entidade_id', sa.String(length=64), nullable=True),
        sa.Column('metadados', JSON_DOC, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_evento_id', 'evento', ['id'])
    op.create_index('ix_evento_tipo', 'evento', ['tipo'])
    op.create_index('ix_evento_empresa_id', 'evento', ['empresa_id'])
    op.create_index('ix_evento_created_at', 'evento', ['created_at'])

    # Eventos do Stripe já processados
    op.create_table(
        'evento_webhook',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('tipo', sa.String(length=100), nullable=False),
        sa.Column('processado_em', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Downgrade schema - Remove todas as tabelas."""
    op.drop_table('evento_webhook')
    op.drop_index('ix_evento_created_at', table_name='evento')
    op.drop_index('ix_evento_empresa_id', table_name='evento')
    op.drop_index('ix_evento_tipo', table_name='evento')
    op.drop_index('ix_evento_id', table_name='evento')
    op.drop_table('evento')
    op.drop_index('ix_peca_lote_id', table_name='peca')
    op.drop_index('ix_peca_id', table_name='peca')
    op.drop_table('peca')
    op.drop_index('ix_lote_codigo_acesso', table_name='lote')
    op.drop_index('ix_lote_status', table_name='lote')
    op.drop_index('ix_lote_empresa_cliente_id', table_name='lote')
    op.drop_index('ix_lote_empresa_banho_id', table_name='lote')
    op.drop_index('ix_lote_id', table_name='lote')
    op.drop_table('lote')
    op.drop_index('ix_usuario_empresa_id', table_name='usuario')
    op.drop_index('ix_usuario_email', table_name='usuario')
    op.drop_table('usuario')
    op.drop_index('ix_faturamento_empresa_id', table_name='faturamento')
    op.drop_index('ix_faturamento_id', table_name='faturamento')
    op.drop_table('faturamento')
    op.drop_index('ix_assinatura_stripe_customer_id', table_name='assinatura')
    op.drop_index('ix_assinatura_status', table_name='assinatura')
    op.drop_index('ix_assinatura_empresa_id', table_name='assinatura')
    op.drop_index('ix_assinatura_id', table_name='assinatura')
    op.drop_table('assinatura')
    op.drop_index('ix_empresa_papel', table_name='empresa')
    op.drop_index('ix_empresa_id', table_name='empresa')
    op.drop_table('empresa')
