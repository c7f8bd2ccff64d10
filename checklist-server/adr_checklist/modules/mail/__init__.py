"""E-mail delivery of checklist archives."""

from .exceptions import MailDeliveryError, MailerError, MailerNotConfiguredError, NoRecipientsError
from .mailer import ChecklistMailer, build_html_body, build_subject, build_text_body

__all__ = [
    "MailDeliveryError",
    "MailerError",
    "MailerNotConfiguredError",
    "NoRecipientsError",
    "ChecklistMailer",
    "build_html_body",
    "build_subject",
    "build_text_body",
]
