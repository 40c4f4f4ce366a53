"""
Form deployment model.
One deployment describes everything that differs between the forms this
service accepts: mandatory fields, templates, recipients and calendar strategy.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum

from formrelay.models.calendar import EventDetails


class CalendarMode(str, Enum):
    NONE = "none"
    ATTACHMENT = "attachment"
    LINK = "link"


class FormTemplates(BaseModel):
    """Jinja2 template names for the two messages a submission can produce"""
    internal: str
    external: Optional[str] = None  # No confirmation email when unset


class FormDeployment(BaseModel):
    form_id: str = Field(..., description="Form identifier, also used in log lines")
    required_fields: List[str] = Field(..., description="Mandatory fields, in the order they are reported")
    calendar_mode: CalendarMode = CalendarMode.NONE
    operator_address: str
    templates: FormTemplates
    internal_subject: str = Field(..., description="str.format template over the submission fields")
    external_subject: Optional[str] = None
    success_message: str
    failure_message: str
    event: Optional[EventDetails] = None
    attachment_filename: Optional[str] = None

    @property
    def sends_confirmation(self) -> bool:
        return self.templates.external is not None
