"""
Response parser — extract error messages from CWC error documents.

A rejected delivery comes back as an XML document holding zero or more
``<Error>`` elements. These helpers are independent of the HTTP layer so
they can be exercised directly on response bodies.
"""

from __future__ import annotations

from typing import Union

from lxml import etree


ERROR_XPATH = "//Error"


def parse_errors(body: Union[str, bytes]) -> list[str]:
    """
    Return the text of every ``Error`` element in ``body``, in document order.

    A body that is empty or not well-formed XML yields an empty list.
    """
    encoding = None
    if isinstance(body, str):
        # Already decoded; any encoding in the XML declaration no longer applies.
        body = body.encode("utf-8")
        encoding = "utf-8"
    if not body.strip():
        return []

    parser = etree.XMLParser(resolve_entities=False, no_network=True, encoding=encoding)
    try:
        root = etree.fromstring(body, parser=parser)
    except etree.XMLSyntaxError:
        return []

    return ["".join(element.itertext()) for element in root.xpath(ERROR_XPATH)]


def extract_errors(body: Union[str, bytes]) -> list[str]:
    """Like ``parse_errors`` but falls back to the raw body as the only error."""
    errors = parse_errors(body)
    if errors:
        return errors
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return [body]
