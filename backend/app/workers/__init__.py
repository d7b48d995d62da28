"""
Workers para processamento em background.

Módulos:
- celery_app: Configuração do Celery e agenda do beat
- manutencao_tasks: Expiração de bloqueios de CPF e limpeza de códigos
"""

from app.workers.celery_app import celery_app

__all__ = ["celery_app"]
