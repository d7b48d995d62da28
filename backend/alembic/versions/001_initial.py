"""
Initial migration - Agenda CIN

Revision ID: 001
Create Date: 2025-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("criado_em", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("atualizado_em", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _prefeitura_fk() -> list:
    return [
        sa.Column("prefeitura_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["prefeitura_id"], ["prefeituras.id"], ondelete="CASCADE"),
    ]


def upgrade() -> None:
    # ========================
    # ENUMS (valores exatos do Python Enum)
    # ========================
    op.execute("CREATE TYPE perfil_usuario AS ENUM ('admin', 'secretaria')")
    op.execute("CREATE TYPE tipo_localidade AS ENUM ('sede', 'distrito', 'povoado')")
    op.execute("""CREATE TYPE status_agendamento AS ENUM (
        'pendente', 'confirmado', 'em_atendimento', 'aguardando_emissao',
        'cin_pronta', 'concluido', 'faltou', 'cancelado'
    )""")

    # ========================
    # TABELA: prefeituras (tenant principal)
    # ========================
    op.create_table(
        "prefeituras",
        *_timestamps(),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(80), nullable=False),
        sa.Column("telefone_contato", sa.String(20), nullable=True),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("protocolo_seq", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
        sa.CheckConstraint("char_length(slug) BETWEEN 3 AND 80", name="ck_prefeituras_slug_tamanho"),
        sa.CheckConstraint("slug ~ '^[a-z0-9-]+$'", name="ck_prefeituras_slug_formato"),
    )
    op.create_index("ix_prefeituras_slug", "prefeituras", ["slug"])

    # ========================
    # TABELA: super_admins
    # ========================
    op.create_table(
        "super_admins",
        *_timestamps(),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("senha_hash", sa.String(255), nullable=False),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_super_admins_email", "super_admins", ["email"])

    # ========================
    # TABELA: usuarios
    # ========================
    op.create_table(
        "usuarios",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("nome", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("cpf", sa.String(11), nullable=True),
        sa.Column("telefone", sa.String(20), nullable=True),
        sa.Column("senha_hash", sa.String(255), nullable=False),
        sa.Column(
            "perfil",
            postgresql.ENUM("admin", "secretaria", name="perfil_usuario", create_type=False),
            nullable=False,
            server_default="secretaria",
        ),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefeitura_id", "email", name="uq_usuarios_prefeitura_email"),
    )
    op.create_index("ix_usuarios_prefeitura_id", "usuarios", ["prefeitura_id"])
    op.create_index("ix_usuarios_email", "usuarios", ["email"])

    # ========================
    # TABELAS: localidades_origem e bairros
    # ========================
    op.create_table(
        "localidades_origem",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("nome", sa.String(150), nullable=False),
        sa.Column(
            "tipo",
            postgresql.ENUM("sede", "distrito", "povoado", name="tipo_localidade", create_type=False),
            nullable=False,
            server_default="distrito",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefeitura_id", "nome", name="uq_localidades_prefeitura_nome"),
        sa.UniqueConstraint("id", "prefeitura_id", name="uq_localidades_id_prefeitura"),
    )
    op.create_index("ix_localidades_origem_prefeitura_id", "localidades_origem", ["prefeitura_id"])

    op.create_table(
        "bairros",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("localidade_id", sa.Integer(), nullable=False),
        sa.Column("nome", sa.String(150), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["localidade_id", "prefeitura_id"],
            ["localidades_origem.id", "localidades_origem.prefeitura_id"],
            ondelete="CASCADE",
            name="fk_bairros_localidade_mesma_prefeitura",
        ),
        sa.UniqueConstraint("localidade_id", "nome", name="uq_bairros_localidade_nome"),
    )
    op.create_index("ix_bairros_prefeitura_id", "bairros", ["prefeitura_id"])
    op.create_index("ix_bairros_localidade_id", "bairros", ["localidade_id"])

    # ========================
    # TABELAS: configuração da agenda
    # ========================
    op.create_table(
        "locais_atendimento",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("nome_local", sa.String(255), nullable=False),
        sa.Column("endereco", sa.Text(), nullable=True),
        sa.Column("link_mapa", sa.String(500), nullable=True),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("id", "prefeitura_id", name="uq_locais_id_prefeitura"),
    )
    op.create_index("ix_locais_atendimento_prefeitura_id", "locais_atendimento", ["prefeitura_id"])

    op.create_table(
        "horarios_config",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("horarios_disponiveis", postgresql.JSONB(), nullable=False),
        sa.Column("max_agendamentos_por_horario", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("periodo_liberado_dias", sa.Integer(), nullable=False, server_default="60"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefeitura_id", name="uq_horarios_config_prefeitura"),
    )
    op.create_index("ix_horarios_config_prefeitura_id", "horarios_config", ["prefeitura_id"])

    op.create_table(
        "datas_bloqueadas",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("data", sa.Date(), nullable=False),
        sa.Column("motivo", sa.String(255), nullable=True),
        sa.Column("tipo_bloqueio", sa.String(20), nullable=False, server_default="full-day"),
        sa.Column("horarios_bloqueados", postgresql.JSONB(), nullable=True),
        sa.Column("criado_por", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(tipo_bloqueio = 'full-day' AND horarios_bloqueados IS NULL) OR "
            "(tipo_bloqueio = 'specific-times' AND horarios_bloqueados IS NOT NULL)",
            name="ck_datas_bloqueadas_horarios",
        ),
    )
    op.create_index("ix_datas_bloqueadas_prefeitura_id", "datas_bloqueadas", ["prefeitura_id"])
    op.create_index("ix_datas_bloqueadas_data", "datas_bloqueadas", ["data"])

    # ========================
    # TABELA: agendamentos
    # ========================
    op.create_table(
        "agendamentos",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("local_id", sa.Integer(), nullable=False),
        sa.Column("protocolo", sa.String(20), nullable=False),
        # Cidadão
        sa.Column("cidadao_nome", sa.String(255), nullable=False),
        sa.Column("cidadao_cpf", sa.String(11), nullable=False),
        sa.Column("telefone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("genero", sa.String(30), nullable=True),
        sa.Column("tipo_cin", sa.String(20), nullable=False, server_default="primeira_via"),
        sa.Column("numero_cin", sa.String(30), nullable=True),
        # Endereço
        sa.Column("endereco_rua", sa.String(255), nullable=True),
        sa.Column("endereco_numero", sa.String(20), nullable=True),
        sa.Column("regiao_tipo", sa.String(20), nullable=True),
        sa.Column("regiao_nome", sa.String(150), nullable=True),
        sa.Column("bairro_nome", sa.String(150), nullable=True),
        # Vaga
        sa.Column("data_agendamento", sa.Date(), nullable=False),
        sa.Column("hora_agendamento", sa.String(5), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(
                "pendente", "confirmado", "em_atendimento", "aguardando_emissao",
                "cin_pronta", "concluido", "faltou", "cancelado",
                name="status_agendamento", create_type=False,
            ),
            nullable=False,
            server_default="pendente",
        ),
        sa.Column("prioridade", sa.String(20), nullable=False, server_default="normal"),
        # Consentimentos
        sa.Column("aceite_termos", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("aceite_notificacoes", sa.Boolean(), nullable=False, server_default="false"),
        # Trilhas
        sa.Column("notas", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("historico_status", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        # Cancelamento / conclusão
        sa.Column("cancelado_por", sa.String(50), nullable=True),
        sa.Column("motivo_cancelamento", sa.Text(), nullable=True),
        sa.Column("concluido_em", sa.DateTime(timezone=True), nullable=True),
        sa.Column("concluido_por", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefeitura_id", "protocolo", name="uq_agendamentos_prefeitura_protocolo"),
        sa.ForeignKeyConstraint(
            ["local_id", "prefeitura_id"],
            ["locais_atendimento.id", "locais_atendimento.prefeitura_id"],
            name="fk_agendamentos_local_mesma_prefeitura",
        ),
    )
    op.create_index("ix_agendamentos_prefeitura_id", "agendamentos", ["prefeitura_id"])
    op.create_index("ix_agendamentos_local_id", "agendamentos", ["local_id"])
    op.create_index("ix_agendamentos_cidadao_cpf", "agendamentos", ["cidadao_cpf"])
    op.create_index("ix_agendamentos_data_agendamento", "agendamentos", ["data_agendamento"])
    op.create_index("ix_agendamentos_status", "agendamentos", ["status"])
    # Contagem de ocupação por vaga
    op.create_index(
        "ix_agendamentos_vaga",
        "agendamentos",
        ["prefeitura_id", "local_id", "data_agendamento", "hora_agendamento"],
    )

    # ========================
    # TABELAS: política de cancelamento
    # ========================
    op.create_table(
        "cpf_cancelamentos",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("cpf", sa.String(11), nullable=False),
        sa.Column("agendamento_id", sa.Integer(), nullable=True),
        sa.Column("data_cancelamento", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cancelado_por", sa.String(50), nullable=False, server_default="cidadao"),
        sa.Column("motivo", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["agendamento_id"], ["agendamentos.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_cpf_cancelamentos_prefeitura_id", "cpf_cancelamentos", ["prefeitura_id"])
    op.create_index("ix_cpf_cancelamentos_cpf", "cpf_cancelamentos", ["cpf"])
    op.create_index("ix_cpf_cancelamentos_data_cancelamento", "cpf_cancelamentos", ["data_cancelamento"])

    op.create_table(
        "cpf_bloqueios",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("cpf", sa.String(11), nullable=False),
        sa.Column("data_bloqueio", sa.DateTime(timezone=True), nullable=False),
        sa.Column("data_desbloqueio", sa.DateTime(timezone=True), nullable=False),
        sa.Column("motivo", sa.String(255), nullable=True),
        sa.Column("cancelamentos_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ativo", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefeitura_id", "cpf", name="uq_cpf_bloqueios_prefeitura_cpf"),
    )
    op.create_index("ix_cpf_bloqueios_prefeitura_id", "cpf_bloqueios", ["prefeitura_id"])

    op.create_table(
        "codigos_cancelamento",
        *_timestamps(),
        *_prefeitura_fk(),
        sa.Column("agendamento_id", sa.Integer(), nullable=False),
        sa.Column("codigo_hash", sa.String(64), nullable=False),
        sa.Column("expira_em", sa.DateTime(timezone=True), nullable=False),
        sa.Column("tentativas", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("agendamento_id"),
        sa.ForeignKeyConstraint(["agendamento_id"], ["agendamentos.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_codigos_cancelamento_prefeitura_id", "codigos_cancelamento", ["prefeitura_id"])
    op.create_index("ix_codigos_cancelamento_expira_em", "codigos_cancelamento", ["expira_em"])


def downgrade() -> None:
    # Dropar tabelas em ordem reversa (respeitar FKs)
    op.drop_table("codigos_cancelamento")
    op.drop_table("cpf_bloqueios")
    op.drop_table("cpf_cancelamentos")
    op.drop_table("agendamentos")
    op.drop_table("datas_bloqueadas")
    op.drop_table("horarios_config")
    op.drop_table("locais_atendimento")
    op.drop_table("bairros")
    op.drop_table("localidades_origem")
    op.drop_table("usuarios")
    op.drop_table("super_admins")
    op.drop_table("prefeituras")

    # Dropar enums
    op.execute("DROP TYPE IF EXISTS status_agendamento")
    op.execute("DROP TYPE IF EXISTS tipo_localidade")
    op.execute("DROP TYPE IF EXISTS perfil_usuario")
