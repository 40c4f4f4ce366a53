"""
Form intake and notification pipeline.

One submission goes through a single linear flow:
1. Check the deployment's mandatory fields (all missing ones are reported together)
2. Check the email address syntax
3. Render the internal notification and, for RSVP-style forms, the submitter's confirmation
4. Attach the .ics invite or embed the calendar link, depending on the deployment
5. Send internal then external, awaiting each; the first failure fails the whole submission

Nothing is stored and nothing is retried. Duplicate submissions produce
duplicate emails.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from formrelay.core.calendar import ICS_CONTENT_TYPE, build_calendar_link, build_ics
from formrelay.core.exceptions import TransportError, ValidationError
from formrelay.core.mailer import MailTransport
from formrelay.core.templates import render_template, with_placeholders
from formrelay.models.calendar import Attendee, CalendarInvite
from formrelay.models.deployment import CalendarMode, FormDeployment
from formrelay.models.notification import Attachment, NotificationMessage
from formrelay.models.submission import FormSubmission, SubmissionResponse

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INVALID_EMAIL_MESSAGE = "Invalid email address"


class SubmissionResult(BaseModel):
    success: bool
    status_code: int
    message: Optional[str] = None
    error: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        return SubmissionResponse(success=self.success, message=self.message, error=self.error).model_dump(exclude_none=True)


def find_missing_fields(submission: FormSubmission, required_fields: List[str]) -> List[str]:
    """Mandatory fields that are absent or blank, in declaration order"""
    return [field for field in required_fields if not submission.field_value(field)]


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_submission(submission: FormSubmission, deployment: FormDeployment) -> None:
    """
    Run the cheap syntactic gates that must pass before any email is sent.

    Raises:
        ValidationError: If mandatory fields are missing or the email is malformed
    """
    missing = find_missing_fields(submission, deployment.required_fields)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing_fields=missing)

    if not is_valid_email(submission.field_value("email")):
        raise ValidationError(INVALID_EMAIL_MESSAGE)


def _header_safe(value: str) -> str:
    return " ".join(value.splitlines()).strip()


def _subject(template: str, fields: Dict[str, str]) -> str:
    return _header_safe(template.format(**fields))


def build_messages(submission: FormSubmission, deployment: FormDeployment) -> List[NotificationMessage]:
    """
    Build the outbound messages for a validated submission.

    Pure and deterministic: the same submission and deployment always produce
    the same messages.

    Args:
        submission (FormSubmission): A submission that passed validate_submission
        deployment (FormDeployment): The form's configuration

    Returns:
        list: The internal notification, followed by the confirmation when the form sends one
    """
    fields = submission.cleaned()
    context = {
        "fields": with_placeholders(fields),
        "name": submission.display_name,
        "event": deployment.event,
        "has_attachment": False,
        "calendar_link": None,
    }

    messages = [
        NotificationMessage(
            recipient=deployment.operator_address,
            subject=_subject(deployment.internal_subject, fields),
            body_html=render_template(deployment.templates.internal, context),
        )
    ]

    if not deployment.sends_confirmation:
        return messages

    attachments = []
    if deployment.event is not None:
        if deployment.calendar_mode == CalendarMode.ATTACHMENT:
            invite = CalendarInvite(
                event=deployment.event,
                attendee=Attendee(name=_header_safe(submission.display_name), email=fields["email"]),
            )
            attachments.append(Attachment(
                filename=deployment.attachment_filename or f"{deployment.event.title.replace(' ', '-')}.ics",
                content=build_ics(invite),
                content_type=ICS_CONTENT_TYPE,
            ))
            context["has_attachment"] = True
        elif deployment.calendar_mode == CalendarMode.LINK:
            context["calendar_link"] = build_calendar_link(deployment.event)

    messages.append(
        NotificationMessage(
            recipient=fields["email"],
            subject=_subject(deployment.external_subject or deployment.internal_subject, fields),
            body_html=render_template(deployment.templates.external, context),
            attachments=attachments,
        )
    )
    return messages


class FormNotifier:
    """Validates a submission and relays it through an injected mail transport"""

    def __init__(self, deployment: FormDeployment, transport: MailTransport):
        self.deployment = deployment
        self.transport = transport

    async def dispatch(self, messages: List[NotificationMessage]) -> None:
        for message in messages:
            await self.transport.send(message)

    async def handle_submission(self, submission: FormSubmission) -> SubmissionResult:
        """
        Process one form submission end to end.

        Validation errors are returned verbatim so the submitter can correct
        them. Any other failure is logged with its cause and reported with the
        form's generic failure message.

        Args:
            submission (FormSubmission): The posted form data

        Returns:
            SubmissionResult: Outcome plus the HTTP status to answer with
        """
        form_id = self.deployment.form_id

        try:
            validate_submission(submission, self.deployment)
        except ValidationError as e:
            logger.info(f"⚠️ Rejected {form_id} submission: {e.message}")
            return SubmissionResult(success=False, status_code=400, error=e.message)

        try:
            messages = build_messages(submission, self.deployment)
            await self.dispatch(messages)
        except TransportError as e:
            logger.error(f"❌ Error sending {form_id} emails: {str(e)}", exc_info=e.cause)
            return SubmissionResult(success=False, status_code=500, error=self.deployment.failure_message)
        except Exception as e:
            logger.error(f"❌ Unexpected error processing {form_id} submission: {str(e)}", exc_info=True)
            return SubmissionResult(success=False, status_code=500, error=self.deployment.failure_message)

        logger.info(f"✅ Processed {form_id} submission from {submission.field_value('email')} ({len(messages)} emails sent)")
        return SubmissionResult(success=True, status_code=200, message=self.deployment.success_message)
