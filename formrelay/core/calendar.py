"""
Calendar artifacts for event confirmations.

Two strategies are supported, one per form deployment:
- an iCalendar (.ics) file attached to the confirmation email
- a Google Calendar "add event" link embedded in the confirmation body

Both are pure functions of the event definition and the attendee, so the
same input always produces the same bytes / URL.
"""

import hashlib
from datetime import datetime, timezone
from urllib.parse import urlencode

from icalendar import Calendar, Event, vCalAddress, vText

from formrelay.models.calendar import CalendarInvite, EventDetails

ICS_CONTENT_TYPE = "text/calendar; charset=utf-8; method=REQUEST"
PRODID = "-//Promontory AI//formrelay//EN"
GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _basic_utc(value: datetime) -> str:
    return _as_utc(value).strftime("%Y%m%dT%H%M%SZ")


def _param_safe(value: str) -> str:
    # Property parameters cannot carry line breaks
    return " ".join(value.split())


def invite_uid(invite: CalendarInvite) -> str:
    """Stable UID so a resubmission updates the same calendar entry"""
    seed = "|".join([
        _basic_utc(invite.event.start),
        invite.event.title,
        invite.attendee.email.strip().lower(),
    ])
    return f"{hashlib.sha1(seed.encode('utf-8')).hexdigest()}@formrelay"


def build_ics(invite: CalendarInvite) -> bytes:
    """
    Serialize an invite to an iCalendar REQUEST.

    DTSTAMP is pinned to the event start instead of the current time so the
    payload only depends on the event window and the attendee.

    Args:
        invite (CalendarInvite): Event definition plus the single attendee

    Returns:
        bytes: The .ics file content (CRLF line endings, folded at 75 octets)
    """
    event_details = invite.event

    calendar = Calendar()
    calendar.add("prodid", PRODID)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("method", "REQUEST")
    calendar.add("x-wr-calname", event_details.calendar_name)

    event = Event()
    event.add("uid", invite_uid(invite))
    event.add("dtstamp", _as_utc(event_details.start))
    event.add("dtstart", _as_utc(event_details.start))
    event.add("dtend", _as_utc(event_details.end))
    event.add("summary", event_details.title)
    event.add("description", event_details.description)
    event.add("location", event_details.location)

    organizer = vCalAddress(f"mailto:{event_details.organizer_email}")
    organizer.params["cn"] = vText(_param_safe(event_details.organizer_name))
    event.add("organizer", organizer, encode=0)

    attendee = vCalAddress(f"mailto:{invite.attendee.email}")
    attendee.params["cn"] = vText(_param_safe(invite.attendee.name))
    attendee.params["role"] = vText("REQ-PARTICIPANT")
    attendee.params["partstat"] = vText("TENTATIVE")
    attendee.params["rsvp"] = vText("TRUE")
    event.add("attendee", attendee, encode=0)

    calendar.add_component(event)
    return calendar.to_ical()


def build_calendar_link(event: EventDetails) -> str:
    """Build a Google Calendar deep link that pre-fills the event."""
    params = {
        "action": "TEMPLATE",
        "text": event.title,
        "dates": f"{_basic_utc(event.start)}/{_basic_utc(event.end)}",
        "details": event.description,
        "location": event.location,
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"
