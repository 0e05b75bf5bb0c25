"""
Shared fixtures for the CWC client tests.
"""

import pytest

from cwc_client.config import configure


PRODUCTION_HOST = "https://cwc.house.gov"
TEST_HOST = "https://test-cwc.house.gov"


def make_config(**kwargs) -> dict:
    config = dict(
        api_key="test-api-key",
        host=TEST_HOST,
        delivery_agent="Example Advocacy Group",
        delivery_agent_ack_email="ack@example.org",
        delivery_agent_contact_name="Pat Organizer",
        delivery_agent_contact_email="pat@example.org",
        delivery_agent_contact_phone="202-555-0100",
    )
    config.update(kwargs)
    return config


def make_params(**kwargs) -> dict:
    params = dict(
        campaign_id="clean-water-2026",
        recipient={
            "member_office": "HCA01",
            "is_response_requested": True,
            "newsletter_opt_in": False,
        },
        constituent={
            "prefix": "Ms.",
            "first_name": "Jane",
            "last_name": "Doe",
            "address": ["123 Main St", "Apt 4"],
            "city": "Chico",
            "state_abbreviation": "CA",
            "zip": "95926",
            "email": "jane@example.com",
        },
        message={
            "subject": "Protect our rivers",
            "library_of_congress_topics": ["Environmental Protection"],
            "bills": [{"congress": 119, "type_abbreviation": "HR", "number": 1234}],
            "pro_or_con": "pro",
            "constituent_message": "Please support clean water funding.",
        },
    )
    params.update(kwargs)
    return params


@pytest.fixture(autouse=True)
def reset_default_configuration():
    configure({})
    yield
    configure({})
