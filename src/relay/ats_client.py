# src/relay/ats_client.py
"""
Backends do ATS.

O orquestrador só conhece a interface ``AtsBackend``; a implementação é
escolhida uma vez na inicialização (``build_backend``):
  - ``HttpAtsBackend``: chamadas reais (APP_ENV=production)
  - ``StubAtsBackend``: respostas sintetizadas em memória, sem rede
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from src.api.schemas import ApplicationPayload, ContactPayload
from src.config.settings import Settings
from src.monitoring.metrics import ATS_CALLS

logger = logging.getLogger("relay.ats")

CREATE_CONTACT = "create_contact"
CREATE_APPLICATION = "create_application"


class UpstreamError(Exception):
    """Falha na chamada ao ATS (rede, timeout, status != 2xx, corpo inválido)."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


@dataclass
class AtsResponse:
    status_code: int
    data: Any


class AtsBackend(Protocol):
    async def create_contact(self, contact: ContactPayload) -> AtsResponse: ...

    async def create_application(self, application: ApplicationPayload) -> AtsResponse: ...


def _record(operation: str, outcome: str):
    try:
        ATS_CALLS.labels(operation=operation, outcome=outcome).inc()
    except Exception:
        # nunca quebre a chamada por falha de métrica
        pass


class HttpAtsBackend:
    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self._contact_url = settings.ats_contact_url
        self._application_url = settings.ats_application_url
        self._headers = {"Authorization": f"Bearer {settings.ats_api_key}"}

    async def _post(self, operation: str, url: str, body: dict) -> AtsResponse:
        # tentativa única, timeout default do httpx
        try:
            r = await self._client.post(url, json=body, headers=self._headers)
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            _record(operation, "error")
            raise UpstreamError(operation, str(exc) or type(exc).__name__) from exc
        _record(operation, "ok")
        return AtsResponse(status_code=r.status_code, data=data)

    async def create_contact(self, contact: ContactPayload) -> AtsResponse:
        return await self._post(CREATE_CONTACT, self._contact_url, contact.model_dump())

    async def create_application(self, application: ApplicationPayload) -> AtsResponse:
        return await self._post(CREATE_APPLICATION, self._application_url, application.model_dump())


class StubAtsBackend:
    """Fake local: id aleatório novo a cada contato, aplicação ecoada."""

    async def create_contact(self, contact: ContactPayload) -> AtsResponse:
        _record(CREATE_CONTACT, "stub")
        return AtsResponse(status_code=200, data={"id": str(uuid.uuid4())})

    async def create_application(self, application: ApplicationPayload) -> AtsResponse:
        _record(CREATE_APPLICATION, "stub")
        return AtsResponse(status_code=200, data=application.model_dump())


def extract_contact_id(response: AtsResponse) -> str:
    data = response.data
    contact_id = data.get("id") if isinstance(data, dict) else None
    if contact_id is None or str(contact_id) == "":
        raise UpstreamError(CREATE_CONTACT, "response has no contact id")
    return str(contact_id)


def build_backend(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> AtsBackend:
    if settings.is_production:
        if client is None:
            raise ValueError("production backend requires an httpx.AsyncClient")
        return HttpAtsBackend(client, settings)
    return StubAtsBackend()
