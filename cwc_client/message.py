"""
Outbound CWC message — assembly and XML serialization.

A ``Message`` is assembled per submission from the client's delivery agent
identity plus caller-supplied parameters. Nested recipient, constituent and
message mappings are copied as given; the remote service is the authority on
their contents. ``Message.to_xml`` renders the CWC 2.0 document.

Params format::

    {
        "campaign_id": str,
        "recipient": {
            "member_office": str,
            "is_response_requested": bool,    # optional
            "newsletter_opt_in": bool,        # optional
        },
        "organization": {                     # optional
            "name": str,
            "contact": {"name": str, "email": str, "phone": str, "about": str},
        },
        "constituent": {
            "prefix": str, "first_name": str, "middle_name": str (opt),
            "last_name": str, "suffix": str (opt), "title": str (opt),
            "organization": str (opt), "address": [str, ...], "city": str,
            "state_abbreviation": str, "zip": str, "phone": str (opt),
            "address_validation": bool (opt), "email": str,
            "email_validation": bool (opt),
        },
        "message": {
            "subject": str,
            "library_of_congress_topics": [str, ...],   # from TOPIC_CODES, at least 1
            "bills": [{"congress": int (opt), "type_abbreviation": str, "number": int}],
            "pro_or_con": "pro" | "con",                # optional
            "organization_statement": str,              # campaign message
            "constituent_message": str,                 # personal message
            "more_info": str (URL),                     # optional
        },
    }

At least one of ``organization_statement`` / ``constituent_message`` is required.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from lxml import etree

from cwc_client.config import ClientOptions
from cwc_client.errors import MissingParameter


CWC_VERSION = "2.0"

REQUIRED_PARAMS = ("campaign_id", "recipient", "constituent", "message")

# Characters XML 1.0 cannot carry, e.g. form feeds pasted from documents
XML_ILLEGAL_CHARS_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

# (params key, XML tag) in schema order
RECIPIENT_FIELDS = [
    ("member_office", "MemberOffice"),
    ("is_response_requested", "IsResponseRequested"),
    ("newsletter_opt_in", "NewsletterOptIn"),
]

CONSTITUENT_NAME_FIELDS = [
    ("prefix", "Prefix"),
    ("first_name", "FirstName"),
    ("middle_name", "MiddleName"),
    ("last_name", "LastName"),
    ("suffix", "Suffix"),
    ("title", "Title"),
    ("organization", "ConstituentOrganization"),
]

CONSTITUENT_CONTACT_FIELDS = [
    ("city", "City"),
    ("state_abbreviation", "StateAbbreviation"),
    ("zip", "Zip"),
    ("phone", "Phone"),
    ("address_validation", "AddressValidation"),
    ("email", "Email"),
    ("email_validation", "EmailValidation"),
]

MESSAGE_BODY_FIELDS = [
    ("pro_or_con", "ProOrCon"),
    ("organization_statement", "OrganizationStatement"),
    ("constituent_message", "ConstituentMessage"),
    ("more_info", "MoreInfo"),
]


@dataclass
class Message:
    """A single CWC submission under construction."""

    delivery: dict[str, Any] = field(default_factory=dict)
    recipient: dict[str, Any] = field(default_factory=dict)
    constituent: dict[str, Any] = field(default_factory=dict)
    message: dict[str, Any] = field(default_factory=dict)
    delivery_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    delivery_date: date = field(default_factory=date.today)

    def to_dict(self) -> dict[str, Any]:
        return {
            "delivery_id": self.delivery_id,
            "delivery_date": self.delivery_date.isoformat(),
            "delivery": self.delivery,
            "recipient": self.recipient,
            "constituent": self.constituent,
            "message": self.message,
        }

    # ---- XML serialization ----

    def to_xml(self) -> bytes:
        """Render the message as a CWC 2.0 XML document."""
        root = etree.Element("CWC")
        _text(root, "CWCVersion", CWC_VERSION)
        self._build_delivery(root)
        self._build_recipient(root)
        self._build_constituent(root)
        self._build_message(root)
        return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True)

    def _build_delivery(self, root: etree._Element) -> None:
        delivery = etree.SubElement(root, "Delivery")
        _text(delivery, "DeliveryId", self.delivery_id)
        _text(delivery, "DeliveryDate", self.delivery_date.strftime("%Y%m%d"))

        agent = self.delivery.get("agent", {})
        _text(delivery, "DeliveryAgent", agent.get("name"))
        _text(delivery, "DeliveryAgentAckEmailAddress", agent.get("ack_email"))
        contact = etree.SubElement(delivery, "DeliveryAgentContact")
        _text(contact, "DeliveryAgentContactName", agent.get("contact_name"))
        _text(contact, "DeliveryAgentContactEmail", agent.get("contact_email"))
        _text(contact, "DeliveryAgentContactPhone", agent.get("contact_phone"))

        organization = self.delivery.get("organization") or {}
        if organization.get("name"):
            _text(delivery, "Organization", organization["name"])
        org_contact = organization.get("contact") or {}
        if any(org_contact.get(k) for k in ("name", "email", "phone")):
            element = etree.SubElement(delivery, "OrganizationContact")
            _text(element, "OrganizationContactName", org_contact.get("name"))
            _text(element, "OrganizationContactEmail", org_contact.get("email"))
            _text(element, "OrganizationContactPhone", org_contact.get("phone"))
        _text(delivery, "OrganizationAbout", org_contact.get("about", organization.get("about")))

        _text(delivery, "CampaignId", self.delivery.get("campaign_id"))

    def _build_recipient(self, root: etree._Element) -> None:
        recipient = etree.SubElement(root, "Recipient")
        for key, tag in RECIPIENT_FIELDS:
            _text(recipient, tag, self.recipient.get(key))

    def _build_constituent(self, root: etree._Element) -> None:
        constituent = etree.SubElement(root, "Constituent")
        for key, tag in CONSTITUENT_NAME_FIELDS:
            _text(constituent, tag, self.constituent.get(key))

        address = self.constituent.get("address") or []
        if isinstance(address, (str, Mapping)):
            address = [address]
        for index, line in enumerate(address, start=1):
            _text(constituent, f"Address{index}", line)

        for key, tag in CONSTITUENT_CONTACT_FIELDS:
            _text(constituent, tag, self.constituent.get(key))

    def _build_message(self, root: etree._Element) -> None:
        message = etree.SubElement(root, "Message")
        _text(message, "Subject", self.message.get("subject"))

        topics = self.message.get("library_of_congress_topics") or []
        if isinstance(topics, str):
            topics = [topics]
        topics_element = etree.SubElement(message, "LibraryOfCongressTopics")
        for topic in topics:
            _text(topics_element, "LibraryOfCongressTopic", topic)

        bills = self.message.get("bills") or []
        if isinstance(bills, (str, Mapping)):
            bills = [bills]
        if bills:
            bills_element = etree.SubElement(message, "Bills")
            for bill in bills:
                bill_element = etree.SubElement(bills_element, "Bill")
                if not isinstance(bill, Mapping):
                    _text(bill_element, "BillNumber", bill)
                    continue
                _text(bill_element, "BillCongress", bill.get("congress"))
                _text(bill_element, "BillTypeAbbreviation", bill.get("type_abbreviation"))
                _text(bill_element, "BillNumber", bill.get("number"))

        for key, tag in MESSAGE_BODY_FIELDS:
            _text(message, tag, self.message.get(key))


def build_message(options: ClientOptions, params: Mapping[str, Any]) -> Message:
    """
    Assemble a Message from client options and caller parameters.

    The delivery agent comes from ``options``; ``organization`` defaults to
    an empty mapping. Recipient, constituent and message mappings are copied
    without inspecting their field names.

    Raises:
        MissingParameter: If a required top-level parameter is absent, if no
            topic code is given, or if neither an organization statement nor
            a constituent message is given.
    """
    for name in REQUIRED_PARAMS:
        if name not in params:
            raise MissingParameter(name)

    message = Message()
    message.delivery["agent"] = options.delivery_agent.to_dict()
    message.delivery["organization"] = params.get("organization", {})
    message.delivery["campaign_id"] = params["campaign_id"]

    message.recipient.update(params["recipient"])
    message.constituent.update(params["constituent"])
    message.message.update(params["message"])

    if not message.message.get("library_of_congress_topics"):
        raise MissingParameter("message.library_of_congress_topics")
    if not (
        message.message.get("organization_statement")
        or message.message.get("constituent_message")
    ):
        raise MissingParameter("message.organization_statement or message.constituent_message")

    return message


def _text(parent: etree._Element, tag: str, value: Optional[Any]) -> Optional[etree._Element]:
    """Append ``<tag>value</tag>`` to parent, skipping absent values.

    Characters XML cannot represent are replaced with spaces.
    """
    if value is None or value == "":
        return None
    element = etree.SubElement(parent, tag)
    if isinstance(value, bool):
        element.text = "Y" if value else "N"
    else:
        element.text = XML_ILLEGAL_CHARS_RE.sub(" ", str(value))
    return element
