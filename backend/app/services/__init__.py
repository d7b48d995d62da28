"""
Services Layer.

Camada de lógica de negócio da Agenda CIN.
"""

from app.services.agenda_service import AgendaService
from app.services.agendamento_service import AgendamentoService
from app.services.auth_service import AuthService
from app.services.bloqueio_service import BloqueioService
from app.services.cancelamento_service import CancelamentoService
from app.services.localidade_service import LocalidadeService
from app.services.prefeitura_service import PrefeituraService
from app.services.usuario_service import UsuarioService
from app.services.whatsapp_service import WhatsAppService

__all__ = [
    "AgendaService",
    "AgendamentoService",
    "AuthService",
    "BloqueioService",
    "CancelamentoService",
    "LocalidadeService",
    "PrefeituraService",
    "UsuarioService",
    "WhatsAppService",
]
