"""
Envio de mensagens de WhatsApp via Z-API.

Sem credenciais configuradas, fora de produção, o envio é apenas
registrado no log. Em produção a falta de credenciais é um erro.
"""

from typing import Any

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.core.config import settings
from app.core.exceptions import MessagingError
from app.core.logging import mascarar_telefone

logger = structlog.get_logger()


def normalizar_telefone(telefone: str) -> str:
    """Telefone no formato E.164 sem '+', assumindo DDI 55 quando ausente."""
    digitos = "".join(filter(str.isdigit, telefone or ""))
    if len(digitos) in (10, 11):
        digitos = f"55{digitos}"
    return digitos


class WhatsAppService:
    """Cliente HTTP do provedor de WhatsApp."""

    def __init__(
        self,
        api_url: str | None = None,
        instance_id: str | None = None,
        token: str | None = None,
        client_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = (api_url or settings.WHATSAPP_API_URL).rstrip("/")
        self.instance_id = instance_id if instance_id is not None else settings.WHATSAPP_INSTANCE_ID
        self.token = token if token is not None else settings.WHATSAPP_TOKEN
        self.client_token = client_token if client_token is not None else settings.WHATSAPP_CLIENT_TOKEN
        self.timeout = timeout or settings.WHATSAPP_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def configurado(self) -> bool:
        return bool(self.instance_id and self.token)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.client_token:
            headers["Client-Token"] = self.client_token
        return headers

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self._headers(),
            transport=self._transport,
        ) as client:
            return await client.post(url, json=payload)

    async def enviar_texto(self, telefone: str, mensagem: str) -> dict[str, Any]:
        """
        Envia mensagem de texto.

        Raises:
            MessagingError: provedor indisponível, resposta de erro ou
                credenciais ausentes em produção.
        """
        numero = normalizar_telefone(telefone)

        if not self.configurado:
            if settings.is_production:
                raise MessagingError("Serviço de WhatsApp não configurado")
            logger.info(
                "WhatsApp simulado (provedor não configurado)",
                telefone=mascarar_telefone(numero),
            )
            return {"simulado": True}

        url = f"{self.api_url}/instances/{self.instance_id}/token/{self.token}/send-text"
        payload = {"phone": numero, "message": mensagem}

        try:
            response = await self._post(url, payload)
        except httpx.RequestError as e:
            logger.error("Falha de rede ao enviar WhatsApp", error=str(e))
            raise MessagingError("Não foi possível contatar o provedor de WhatsApp") from e

        if response.status_code >= 400:
            logger.error(
                "Provedor de WhatsApp recusou a mensagem",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise MessagingError(f"Provedor respondeu com status {response.status_code}")

        data = response.json() if response.content else {}
        logger.info(
            "WhatsApp enviado",
            telefone=mascarar_telefone(numero),
            message_id=data.get("messageId") or data.get("id"),
        )
        return data


def get_whatsapp_service() -> WhatsAppService:
    """Dependency do cliente de WhatsApp."""
    return WhatsAppService()
