from pydantic import BaseModel, Field
from datetime import datetime


class EventDetails(BaseModel):
    """Fixed definition of the event a form collects RSVPs for"""
    title: str
    description: str
    start: datetime = Field(..., description="Start time, timezone-aware (UTC)")
    end: datetime = Field(..., description="End time, timezone-aware (UTC)")
    location: str
    organizer_name: str
    organizer_email: str
    calendar_name: str
    # Human-readable labels used in the email bodies
    date_label: str
    time_label: str


class Attendee(BaseModel):
    name: str
    email: str


class CalendarInvite(BaseModel):
    """One event with a single attendee in tentative status"""
    event: EventDetails
    attendee: Attendee
