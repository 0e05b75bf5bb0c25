"""
Communicating with Congress (CWC) API client.

Builds and delivers constituent messages to House offices through the CWC
delivery API, and reports which offices currently accept messages.

API: ``POST {host}/v2/message?apikey=...`` with a CWC 2.0 XML document.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from cwc_client.config import ClientOptions, default_client_configuration, resolve_options
from cwc_client.errors import BadRequest
from cwc_client.message import Message, build_message
from cwc_client.office import Office, list_offices, office_supported
from cwc_client.response_parser import extract_errors


logger = logging.getLogger(__name__)

MESSAGE_PATH = "/v2/message"
XML_CONTENT_TYPE = "application/xml"


class Client:
    """
    Client for the CWC message delivery API.

    Options are merged over the process-wide defaults set with
    ``cwc_client.configure`` and validated immediately.

    Required options keys:
        api_key                         API key issued to the delivery agent
        host                            e.g. https://cwc.house.gov
        delivery_agent                  must match the api key owner
        delivery_agent_ack_email
        delivery_agent_contact_name
        delivery_agent_contact_email
        delivery_agent_contact_phone    format xxx-xxx-xxxx

    Usage:
        with Client(api_key="...", host="https://cwc.house.gov", ...) as client:
            if client.office_supported("HCA01"):
                message = client.create_message(params)
                client.deliver(message)
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[float] = None,
        **overrides: Any,
    ) -> None:
        merged = dict(options or {})
        merged.update(overrides)
        self.options: ClientOptions = resolve_options(default_client_configuration(), merged)

        self._owns_client = http_client is None
        if http_client is None:
            kwargs: dict[str, Any] = {}
            if transport is not None:
                kwargs["transport"] = transport
            if timeout is not None:
                kwargs["timeout"] = timeout
            http_client = httpx.Client(**kwargs)
        self._client = http_client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # ---- Messages ----

    def create_message(self, params: Mapping[str, Any]) -> Message:
        """
        Assemble a message for delivery.

        Use ``message["constituent_message"]`` for a personal message or
        ``message["organization_statement"]`` for a campaign message. See
        ``cwc_client.message`` for the full params format.
        """
        return build_message(self.options, params)

    def deliver(self, message: Message) -> bool:
        """
        Submit a message to the CWC API.

        Returns:
            True once the service accepts the message.

        Raises:
            BadRequest: If the service rejects the message (HTTP 400).
            httpx.HTTPError: For any other transport or HTTP failure.
        """
        logger.info(
            "Delivering message %s for campaign %s to %s",
            message.delivery_id,
            message.delivery.get("campaign_id"),
            message.recipient.get("member_office"),
        )
        resp = self._client.post(
            self.action(MESSAGE_PATH),
            content=message.to_xml(),
            headers={"Content-Type": XML_CONTENT_TYPE},
        )
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 400:
                raise
            # Prefer the charset declared in Content-Type; otherwise let the
            # XML declaration decide.
            if e.response.charset_encoding:
                body = e.response.text
            else:
                body = e.response.content
            errors = extract_errors(body)
            logger.warning(
                "Message %s rejected: %s", message.delivery_id, "; ".join(errors)
            )
            raise BadRequest(e, errors) from e
        return True

    # ---- Offices ----

    def offices(self) -> list[Office]:
        """List the offices currently accepting messages."""
        return list_offices(self.options, self._client, self.action)

    def office_supported(self, office_code: str) -> bool:
        """Check whether messages can be delivered to ``office_code``."""
        return office_supported(self.offices(), office_code)

    # ---- Utility ----

    def action(self, path: str) -> str:
        """Build the authenticated URL for an API path."""
        host = self.options.host.rstrip("/")
        path = path.lstrip("/")
        return f"{host}/{path}?apikey={self.options.api_key}"
