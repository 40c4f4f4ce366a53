"""Unit tests for the form intake and notification pipeline."""

import logging

import pytest

from formrelay.core.calendar import ICS_CONTENT_TYPE
from formrelay.core.deployments import CONTACT_FORM_ID, RSVP_FORM_ID, get_deployment
from formrelay.core.notifier import (
    FormNotifier,
    build_messages,
    find_missing_fields,
    is_valid_email,
)
from formrelay.models.submission import FormSubmission
from tests.fakes import RecordingTransport, make_settings


def rsvp_notifier(transport, **settings_overrides):
    deployment = get_deployment(RSVP_FORM_ID, make_settings(**settings_overrides))
    return FormNotifier(deployment, transport)


@pytest.mark.asyncio
async def test_missing_fields_are_listed_and_nothing_is_sent():
    transport = RecordingTransport()
    notifier = rsvp_notifier(transport)

    result = await notifier.handle_submission(FormSubmission(email="ada@example.com"))

    assert result.success is False
    assert result.status_code == 400
    assert result.error == "Missing required fields: name, role"
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_whitespace_only_fields_count_as_missing():
    transport = RecordingTransport()
    notifier = rsvp_notifier(transport)

    result = await notifier.handle_submission(FormSubmission(name="   ", email=" ", role="\t"))

    assert result.error == "Missing required fields: name, email, role"
    assert transport.calls == 0


@pytest.mark.asyncio
async def test_invalid_email_is_rejected_without_sending():
    transport = RecordingTransport()
    notifier = rsvp_notifier(transport)

    result = await notifier.handle_submission(FormSubmission(name="Ada", email="not-an-email", role="Researcher"))

    assert result.success is False
    assert result.status_code == 400
    assert result.error == "Invalid email address"
    assert transport.calls == 0


@pytest.mark.parametrize(
    "email,expected",
    [
        ("ada@example.com", True),
        ("a.b+c@sub.example.co.uk", True),
        ("not-an-email", False),
        ("ada@example", False),
        ("ada @example.com", False),
        ("@example.com", False),
    ],
)
def test_email_syntax_gate(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.asyncio
async def test_valid_rsvp_sends_internal_then_confirmation():
    transport = RecordingTransport()
    notifier = rsvp_notifier(transport)

    result = await notifier.handle_submission(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"))

    assert result.success is True
    assert result.status_code == 200
    assert result.to_response() == {
        "success": True,
        "message": "RSVP submitted successfully! Check your email for confirmation.",
    }
    assert transport.calls == 2

    internal, confirmation = transport.sent
    assert internal.recipient == "edgecases@promontoryai.com"
    assert internal.subject == "Edge Cases Soirée RSVP - Ada"
    assert confirmation.recipient == "ada@example.com"
    assert confirmation.subject == "Welcome to Edge Cases Soirée - Your AI Gathering Awaits"
    for message in transport.sent:
        assert message.subject
        assert message.body_html


@pytest.mark.asyncio
async def test_transport_failure_on_second_send_fails_whole_submission(caplog):
    transport = RecordingTransport(fail_on_call=2)
    notifier = rsvp_notifier(transport)

    with caplog.at_level(logging.ERROR, logger="formrelay.core.notifier"):
        result = await notifier.handle_submission(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"))

    assert result.success is False
    assert result.status_code == 500
    assert result.error == "Failed to submit RSVP. Please try again."
    assert "smtp down" not in result.error
    assert transport.calls == 2
    assert "smtp down: 535 authentication failed" in caplog.text


@pytest.mark.asyncio
async def test_first_send_failure_stops_dispatch():
    transport = RecordingTransport(fail_on_call=1)
    notifier = rsvp_notifier(transport)

    result = await notifier.handle_submission(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"))

    assert result.success is False
    assert transport.calls == 1
    assert transport.sent == []


def test_optional_fields_render_placeholder():
    deployment = get_deployment(RSVP_FORM_ID, make_settings())
    internal = build_messages(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"), deployment)[0]

    assert "<strong>Company:</strong> Not provided" in internal.body_html
    assert "<strong>Edge:</strong> Not provided" in internal.body_html
    assert "<strong>Role:</strong> Researcher" in internal.body_html


def test_submitted_values_are_html_escaped():
    deployment = get_deployment(RSVP_FORM_ID, make_settings())
    submission = FormSubmission(
        name="<script>alert(1)</script>",
        email="ada@example.com",
        role="Researcher",
        company='Acme & "Sons"',
    )

    internal, confirmation = build_messages(submission, deployment)

    assert "<script>" not in internal.body_html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in internal.body_html
    assert "Acme &amp; &#34;Sons&#34;" in internal.body_html
    assert "<script>" not in confirmation.body_html


def test_subject_strips_line_breaks():
    deployment = get_deployment(RSVP_FORM_ID, make_settings())
    submission = FormSubmission(name="Ada\r\nBcc: victim@example.com", email="ada@example.com", role="Researcher")

    internal = build_messages(submission, deployment)[0]

    assert "\n" not in internal.subject
    assert "\r" not in internal.subject


def test_attachment_mode_attaches_ics_invite():
    deployment = get_deployment(RSVP_FORM_ID, make_settings(rsvp_calendar_mode="attachment"))
    messages = build_messages(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"), deployment)

    internal, confirmation = messages
    assert internal.attachments == []
    assert len(confirmation.attachments) == 1
    attachment = confirmation.attachments[0]
    assert attachment.filename == "Edge-Cases-Soiree.ics"
    assert attachment.content_type == ICS_CONTENT_TYPE
    assert attachment.content.startswith(b"BEGIN:VCALENDAR")
    assert "calendar invite attached" in confirmation.body_html


@pytest.mark.asyncio
async def test_multi_line_name_still_gets_calendar_invite():
    transport = RecordingTransport()
    notifier = rsvp_notifier(transport, rsvp_calendar_mode="attachment")

    result = await notifier.handle_submission(
        FormSubmission(name="Ada\r\nLovelace", email="ada@example.com", role="Researcher")
    )

    assert result.success is True
    assert result.status_code == 200
    confirmation = transport.sent[1]
    ics = confirmation.attachments[0].content.replace(b"\r\n ", b"")
    assert b"Ada Lovelace" in ics


def test_link_mode_embeds_calendar_link_and_no_attachment():
    deployment = get_deployment(RSVP_FORM_ID, make_settings(rsvp_calendar_mode="link"))
    confirmation = build_messages(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"), deployment)[1]

    assert confirmation.attachments == []
    assert 'href="https://calendar.google.com/calendar/render?action=TEMPLATE&amp;' in confirmation.body_html
    assert "calendar invite attached" not in confirmation.body_html


def test_none_mode_has_no_calendar_artifact():
    deployment = get_deployment(RSVP_FORM_ID, make_settings(rsvp_calendar_mode="none"))
    confirmation = build_messages(FormSubmission(name="Ada", email="ada@example.com", role="Researcher"), deployment)[1]

    assert confirmation.attachments == []
    assert "calendar.google.com" not in confirmation.body_html
    assert "calendar invite attached" not in confirmation.body_html


def test_messages_are_deterministic():
    deployment = get_deployment(RSVP_FORM_ID, make_settings())
    submission = FormSubmission(name="Ada", email="ada@example.com", role="Researcher", submittedAt="2025-06-01T10:00:00Z")

    assert build_messages(submission, deployment) == build_messages(submission, deployment)


@pytest.mark.asyncio
async def test_contact_form_sends_only_internal_notification():
    transport = RecordingTransport()
    deployment = get_deployment(CONTACT_FORM_ID, make_settings())
    notifier = FormNotifier(deployment, transport)

    result = await notifier.handle_submission(FormSubmission(
        firstName="Grace",
        lastName="Hopper",
        email="grace@example.com",
        company="Navy",
        message="Interested in a pilot.",
        ad_source="linkedin",
    ))

    assert result.success is True
    assert transport.calls == 1
    message = transport.sent[0]
    assert message.recipient == "hello@promontoryai.com"
    assert message.subject == "New Contact Inquiry - Grace Hopper"
    assert "<strong>Phone:</strong> Not provided" in message.body_html
    assert "<strong>Source:</strong> linkedin" in message.body_html


def test_contact_missing_fields_follow_declared_order():
    deployment = get_deployment(CONTACT_FORM_ID, make_settings())
    submission = FormSubmission(email="grace@example.com", lastName="Hopper")

    assert find_missing_fields(submission, deployment.required_fields) == ["firstName", "company", "message"]
