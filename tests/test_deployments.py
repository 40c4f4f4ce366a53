"""Unit tests for the form deployment registry."""

import pytest

from formrelay.core.deployments import CONTACT_FORM_ID, RSVP_FORM_ID, get_deployment, list_deployments
from formrelay.core.exceptions import UnknownFormError
from formrelay.models.deployment import CalendarMode
from tests.fakes import make_settings


def test_rsvp_deployment():
    deployment = get_deployment(RSVP_FORM_ID, make_settings(rsvp_operator_address="ops@example.com"))

    assert deployment.required_fields == ["name", "email", "role"]
    assert deployment.calendar_mode == CalendarMode.ATTACHMENT
    assert deployment.operator_address == "ops@example.com"
    assert deployment.sends_confirmation is True
    assert deployment.event is not None


def test_contact_deployment():
    deployment = get_deployment(CONTACT_FORM_ID, make_settings())

    assert deployment.required_fields == ["firstName", "lastName", "email", "company", "message"]
    assert deployment.calendar_mode == CalendarMode.NONE
    assert deployment.sends_confirmation is False


@pytest.mark.parametrize(
    "configured,expected",
    [
        ("link", CalendarMode.LINK),
        (" Attachment ", CalendarMode.ATTACHMENT),
        ("none", CalendarMode.NONE),
        ("carrier-pigeon", CalendarMode.NONE),
    ],
)
def test_rsvp_calendar_mode_is_configurable(configured, expected):
    deployment = get_deployment(RSVP_FORM_ID, make_settings(rsvp_calendar_mode=configured))
    assert deployment.calendar_mode == expected


def test_unknown_form_raises():
    with pytest.raises(UnknownFormError):
        get_deployment("newsletter", make_settings())


def test_list_deployments():
    assert [deployment.form_id for deployment in list_deployments(make_settings())] == [RSVP_FORM_ID, CONTACT_FORM_ID]
