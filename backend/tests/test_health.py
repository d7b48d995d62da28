"""
Testes para o endpoint de health check.
"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Testa endpoint de health check."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_check_sem_prefeitura(client: AsyncClient):
    """Health check não exige cabeçalho de prefeitura nem token."""
    response = await client.get("/api/health", headers={})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_readiness_consulta_banco(client: AsyncClient):
    response = await client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "ok"


@pytest.mark.asyncio
async def test_request_id_no_cabecalho(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.headers.get("x-request-id")
