"""
Configuração do Celery.

Worker para as rotinas periódicas de manutenção da agenda.
"""

from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery_app = Celery(
    "agenda-cin",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "app.workers.manutencao_tasks",
    ],
)

# Configurações do Celery
celery_app.conf.update(
    # Timezone
    timezone=settings.TIMEZONE,
    enable_utc=True,

    # Serialização
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Tarefas
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,

    # Retries
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Concorrência
    worker_prefetch_multiplier=1,

    # Resultados
    result_expires=60 * 60 * 24,  # 24 horas

    # Beat Schedule (tarefas agendadas)
    beat_schedule={
        # Desativa bloqueios de CPF vencidos no início de cada hora
        "expirar-bloqueios-cpf": {
            "task": "app.workers.manutencao_tasks.expirar_bloqueios_task",
            "schedule": crontab(minute=0),
        },
        # Remove códigos de cancelamento vencidos a cada 15 minutos
        "limpar-codigos-cancelamento": {
            "task": "app.workers.manutencao_tasks.limpar_codigos_expirados_task",
            "schedule": 900.0,
        },
    },
)

# Para execução local: celery -A app.workers.celery_app worker --loglevel=info
# Para beat: celery -A app.workers.celery_app beat --loglevel=info
