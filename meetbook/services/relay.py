"""Lead relay: hand an inbound lead to the Bland AI outbound-calling API.

The voice agent Bland places the call, talks to the lead, and comes back to
this service's availability/suggest/book endpoints to schedule the meeting.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from meetbook.config import Settings
from meetbook.errors import RelayError
from meetbook.models import LeadWebhook, WebhookResponse

from .booking import redact_pii

logger = logging.getLogger(__name__)

DEFAULT_LEAD_MESSAGE = "Lead interested in scheduling consultation"


class LeadRelay:
    """Start a Bland AI call for a lead."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._client = client

    def build_call_payload(self, lead: LeadWebhook) -> dict[str, Any]:
        return {
            "phone_number": lead.phone_number,
            "task": self._settings.bland_task,
            "voice": self._settings.bland_voice,
            "request_data": {
                "lead_name": lead.lead_name,
                "lead_email": lead.lead_email,
                "preferred_datetime_raw": lead.preferred_datetime_raw or "",
                "lead_phone": lead.lead_phone or lead.phone_number,
                "lead_message": lead.lead_message or DEFAULT_LEAD_MESSAGE,
            },
            "answering_machine_detection": False,
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> Any:
        resp = await client.post(
            self._settings.bland_api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self._settings.bland_api_key}"},
        )
        resp.raise_for_status()
        return resp.json()

    async def start_call(self, lead: LeadWebhook) -> WebhookResponse:
        """Ask Bland AI to call the lead.

        Raises:
            RelayError: no API key is configured, the API is unreachable,
                or it answered with an error status.
        """
        if not self._settings.bland_api_key:
            raise RelayError("Bland AI API key not configured")

        payload = self.build_call_payload(lead)
        logger.info("Relaying lead %s to Bland AI", redact_pii(lead.phone_number))

        try:
            if self._client is not None:
                result = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient(timeout=15) as client:
                    result = await self._post(client, payload)
        except httpx.HTTPStatusError as exc:
            logger.error("Bland AI API error: %s", exc.response.status_code)
            raise RelayError(
                f"Bland AI API error: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.exception("Could not reach Bland AI")
            raise RelayError("Bland AI API unreachable") from exc

        logger.info("Bland AI accepted call for %s", redact_pii(lead.phone_number))

        return WebhookResponse(
            success=True,
            message="Conversation initiated with Bland AI",
            data=lead.model_dump(),
            bland_ai=result,
        )
