"""
Client for the Communicating with Congress (CWC) message delivery API.

Assembles constituent messages, delivers them as CWC XML documents, and
reports which House offices currently accept messages.
"""

from cwc_client.config import (
    ClientOptions,
    DeliveryAgent,
    configure,
    config_from_env,
    default_client_configuration,
    load_client_config,
)
from cwc_client.errors import (
    BadRequest,
    CwcError,
    DeliveryError,
    MissingConfiguration,
    MissingParameter,
)
from cwc_client.message import Message
from cwc_client.office import Office
from cwc_client.topic_codes import TOPIC_CODES
from cwc_client.client import Client

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientOptions",
    "DeliveryAgent",
    "Message",
    "Office",
    "TOPIC_CODES",
    "configure",
    "config_from_env",
    "default_client_configuration",
    "load_client_config",
    "CwcError",
    "MissingConfiguration",
    "MissingParameter",
    "BadRequest",
    "DeliveryError",
]
