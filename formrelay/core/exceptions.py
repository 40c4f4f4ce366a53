"""
Exceptions raised by the form submission pipeline.

ValidationError carries a message that is safe to show to the submitter.
TransportError carries the real delivery failure, which is only ever logged.
"""


class FormRelayException(Exception):
    """Base class for all form relay errors."""


class ValidationError(FormRelayException):
    """A submission is missing mandatory fields or has a malformed email."""

    def __init__(self, message: str, missing_fields: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.missing_fields = missing_fields or []


class TransportError(FormRelayException):
    """The mail transport could not deliver a message."""

    def __init__(self, recipient: str, cause: Exception):
        super().__init__(f"Failed to send email to {recipient}: {cause}")
        self.recipient = recipient
        self.cause = cause


class UnknownFormError(FormRelayException):
    """No deployment is configured under the requested form id."""
