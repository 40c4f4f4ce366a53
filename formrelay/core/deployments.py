"""
Form deployment registry.
This module defines the forms the service accepts and resolves the
per-form configuration (mandatory fields, templates, recipients, calendar
strategy) that the notifier is parameterised with.

All routes should use these helpers to get form-specific configuration
instead of hardcoding addresses or field lists.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from formrelay.core.config import Settings, get_settings
from formrelay.core.exceptions import UnknownFormError
from formrelay.models.calendar import EventDetails
from formrelay.models.deployment import CalendarMode, FormDeployment, FormTemplates

logger = logging.getLogger(__name__)

RSVP_FORM_ID = "rsvp"
CONTACT_FORM_ID = "contact"

EDGE_CASES_SOIREE = EventDetails(
    title="Edge Cases Soirée",
    description="A soirée for those working seriously and semi-seriously on artificial intelligence",
    start=datetime(2025, 6, 25, 18, 0, tzinfo=timezone.utc),
    end=datetime(2025, 6, 25, 21, 0, tzinfo=timezone.utc),
    location="[VENUE TBD]",
    organizer_name="Promontory AI",
    organizer_email="edgecases@promontoryai.com",
    calendar_name="Edge Cases Soirée",
    date_label="Wednesday, June 25th, 2025",
    time_label="6:00 PM - 9:00 PM",
)


def _parse_calendar_mode(value: Optional[str]) -> CalendarMode:
    try:
        return CalendarMode((value or "none").strip().lower())
    except ValueError:
        logger.warning(f"Unknown calendar mode '{value}', falling back to 'none'")
        return CalendarMode.NONE


def _rsvp_deployment(settings: Settings) -> FormDeployment:
    return FormDeployment(
        form_id=RSVP_FORM_ID,
        required_fields=["name", "email", "role"],
        calendar_mode=_parse_calendar_mode(settings.rsvp_calendar_mode),
        operator_address=settings.rsvp_operator_address,
        templates=FormTemplates(internal="rsvp_internal.html", external="rsvp_confirmation.html"),
        internal_subject="Edge Cases Soirée RSVP - {name}",
        external_subject="Welcome to Edge Cases Soirée - Your AI Gathering Awaits",
        success_message="RSVP submitted successfully! Check your email for confirmation.",
        failure_message="Failed to submit RSVP. Please try again.",
        event=EDGE_CASES_SOIREE,
        attachment_filename="Edge-Cases-Soiree.ics",
    )


def _contact_deployment(settings: Settings) -> FormDeployment:
    return FormDeployment(
        form_id=CONTACT_FORM_ID,
        required_fields=["firstName", "lastName", "email", "company", "message"],
        calendar_mode=CalendarMode.NONE,
        operator_address=settings.contact_operator_address,
        templates=FormTemplates(internal="contact_internal.html"),
        internal_subject="New Contact Inquiry - {firstName} {lastName}",
        success_message="Thank you for reaching out! We'll be in touch soon.",
        failure_message="Failed to send your message. Please try again.",
    )


_BUILDERS = {
    RSVP_FORM_ID: _rsvp_deployment,
    CONTACT_FORM_ID: _contact_deployment,
}


def get_deployment(form_id: str, settings: Optional[Settings] = None) -> FormDeployment:
    """
    Resolve the configuration for a form.

    Args:
        form_id (str): The form identifier (e.g. "rsvp")
        settings: Application settings (optional, cached settings are used if not provided)

    Returns:
        FormDeployment: The form's fixed configuration

    Raises:
        UnknownFormError: If no form is registered under form_id
    """
    if settings is None:
        settings = get_settings()

    builder = _BUILDERS.get(form_id)
    if builder is None:
        raise UnknownFormError(f"Form '{form_id}' is not configured")

    return builder(settings)


def list_deployments(settings: Optional[Settings] = None) -> List[FormDeployment]:
    """Get every configured form deployment."""
    if settings is None:
        settings = get_settings()
    return [builder(settings) for builder in _BUILDERS.values()]

