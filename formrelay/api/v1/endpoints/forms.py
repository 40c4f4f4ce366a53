"""
Form submission routes.

Each landing-page form posts its JSON payload here. The route resolves the
form's deployment, builds a notifier around the injected mail transport and
maps the outcome to an HTTP status:
- 200 {"success": true, "message": ...}
- 400 {"success": false, "error": "Missing required fields: ..."}
- 500 {"success": false, "error": <generic failure message>}
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from formrelay.core.config import Settings
from formrelay.core.deployments import CONTACT_FORM_ID, RSVP_FORM_ID, get_deployment
from formrelay.core.mailer import MailTransport, SmtpTransport
from formrelay.core.notifier import FormNotifier
from formrelay.core.rate_limit import enforce_rate_limit
from formrelay.models.submission import FormSubmission

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_transport(settings: Settings = Depends(get_app_settings)) -> MailTransport:
    """Mail transport for this request; overridden in tests"""
    return SmtpTransport.from_settings(settings)


def notifier_dependency(form_id: str):
    def get_notifier(
        settings: Settings = Depends(get_app_settings),
        transport: MailTransport = Depends(get_transport),
    ) -> FormNotifier:
        return FormNotifier(get_deployment(form_id, settings), transport)

    get_notifier.__name__ = f"get_{form_id}_notifier"
    return get_notifier


get_rsvp_notifier = notifier_dependency(RSVP_FORM_ID)
get_contact_notifier = notifier_dependency(CONTACT_FORM_ID)


async def _submit(notifier: FormNotifier, submission: FormSubmission) -> JSONResponse:
    result = await notifier.handle_submission(submission)
    return JSONResponse(status_code=result.status_code, content=result.to_response())


@router.post("/rsvp")
async def submit_rsvp(submission: FormSubmission, notifier: FormNotifier = Depends(get_rsvp_notifier)):
    """
    Accept an event RSVP.

    Sends the RSVP to the event operators and a confirmation (with the
    calendar invite or calendar link) to the attendee.
    """
    return await _submit(notifier, submission)


@router.post("/contact")
async def submit_contact(submission: FormSubmission, notifier: FormNotifier = Depends(get_contact_notifier)):
    """Accept a contact inquiry and forward it to the operators."""
    return await _submit(notifier, submission)
