"""
Client configuration model.

Resolves the credentials a ``Client`` needs from a process-wide default
configuration merged with per-instance overrides. Also supports loading
configuration from a JSON file (with the API key sourced from an
environment variable) and from ``CWC_*`` environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from cwc_client.errors import MissingConfiguration


PRODUCTION_HOST = "https://cwc.house.gov"

REQUIRED_KEYS = (
    "api_key",
    "host",
    "delivery_agent",
    "delivery_agent_ack_email",
    "delivery_agent_contact_name",
    "delivery_agent_contact_email",
    "delivery_agent_contact_phone",
)

ENV_PREFIX = "CWC_"


@dataclass(frozen=True)
class DeliveryAgent:
    """The organization submitting messages on behalf of constituents.

    Attributes:
        name: Delivery agent name; must match the owner of the API key.
        ack_email: Address that receives delivery acknowledgements.
        contact_name: Technical contact at the delivery agent.
        contact_email: Technical contact email.
        contact_phone: Technical contact phone, formatted xxx-xxx-xxxx.
    """

    name: str
    ack_email: str
    contact_name: str
    contact_email: str
    contact_phone: str

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "ack_email": self.ack_email,
            "contact_name": self.contact_name,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
        }


@dataclass(frozen=True)
class ClientOptions:
    """Resolved, immutable options for a single client instance."""

    api_key: str
    host: str
    delivery_agent: DeliveryAgent

    @property
    def is_production(self) -> bool:
        return self.host.startswith(PRODUCTION_HOST)


# ---------------------------------------------------------------------------
# Process-wide defaults
# ---------------------------------------------------------------------------

# Set once at startup, before clients are constructed concurrently. Client
# construction only reads it.
_default_client_configuration: dict[str, Any] = {}


def configure(options: Mapping[str, Any]) -> None:
    """Replace the process-wide default client configuration."""
    global _default_client_configuration
    _default_client_configuration = dict(options)


def default_client_configuration() -> dict[str, Any]:
    """Return a copy of the process-wide default client configuration."""
    return dict(_default_client_configuration)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_options(
    process_defaults: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]] = None,
) -> ClientOptions:
    """Merge ``overrides`` over ``process_defaults`` and build ClientOptions.

    The merge is shallow: an override key replaces the default outright.

    Raises:
        MissingConfiguration: If any required key is absent after merging.
    """
    options = dict(process_defaults)
    options.update(overrides or {})

    for key in REQUIRED_KEYS:
        if key not in options:
            raise MissingConfiguration(key)

    return ClientOptions(
        api_key=options["api_key"],
        host=options["host"],
        delivery_agent=DeliveryAgent(
            name=options["delivery_agent"],
            ack_email=options["delivery_agent_ack_email"],
            contact_name=options["delivery_agent_contact_name"],
            contact_email=options["delivery_agent_contact_email"],
            contact_phone=options["delivery_agent_contact_phone"],
        ),
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_client_config(config_path: str | Path) -> dict[str, Any]:
    """Load client configuration keys from a JSON file.

    The API key should not be stored in the file. Instead the ``api_key_env``
    field names an environment variable to read it from at runtime. If that
    variable is unset the key is simply left out, so resolution later fails
    with ``MissingConfiguration("api_key")``.

    Args:
        config_path: Path to the JSON config file.

    Returns:
        A configuration mapping suitable for ``configure`` or ``Client``.

    Raises:
        FileNotFoundError: If config_path does not exist.
        json.JSONDecodeError: If the JSON is malformed.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Client config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw: dict[str, Any] = json.load(f)

    api_key_env = raw.pop("api_key_env", "")
    if api_key_env and "api_key" not in raw:
        api_key = os.environ.get(api_key_env, "")
        if api_key:
            raw["api_key"] = api_key

    return {key: value for key, value in raw.items() if key in REQUIRED_KEYS}


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect configuration keys from ``CWC_*`` environment variables.

    ``CWC_API_KEY`` maps to ``api_key``, ``CWC_DELIVERY_AGENT_ACK_EMAIL`` to
    ``delivery_agent_ack_email``, and so on. Unset or empty variables are
    skipped.
    """
    if environ is None:
        environ = os.environ

    config: dict[str, Any] = {}
    for key in REQUIRED_KEYS:
        value = environ.get(ENV_PREFIX + key.upper())
        if value:
            config[key] = value
    return config
