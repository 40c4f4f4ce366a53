from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Any


class FormSubmission(BaseModel):
    """
    Flat payload posted by a landing-page form.

    Every field is optional here; which ones are mandatory depends on the
    form deployment and is checked by the notifier so that the submitter gets
    the full list of missing fields back in one response.
    """
    model_config = ConfigDict(extra="ignore")

    # Contact details
    name: Optional[str] = None  # Single name field (RSVP form)
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    # Content
    message: Optional[str] = None
    edge: Optional[str] = None  # Fixed-choice interest tag on the RSVP form
    # Attribution
    ad_source: Optional[str] = None
    referrer_url: Optional[str] = None
    submittedAt: Optional[str] = None  # Client-side timestamp, passed through as-is

    def field_value(self, field: str) -> str:
        """Return a field trimmed of whitespace, or an empty string when absent"""
        value = getattr(self, field, None)
        if value is None:
            return ""
        return value.strip()

    @property
    def display_name(self) -> str:
        """Full name from either the single name field or first/last name"""
        if self.field_value("name"):
            return self.field_value("name")
        parts = [self.field_value("firstName"), self.field_value("lastName")]
        return " ".join(part for part in parts if part)

    def cleaned(self) -> Dict[str, Any]:
        """All known fields, trimmed, with absent values as empty strings"""
        return {field: self.field_value(field) for field in type(self).model_fields}


class SubmissionResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
