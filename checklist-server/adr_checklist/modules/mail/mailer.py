"""Sends the checklist archive to the inspector's recipients over SMTP."""

from __future__ import annotations

import html
import logging
import smtplib
import socket
from email.message import EmailMessage
from email.utils import formataddr
from typing import Callable

from adr_checklist.core.config import MailSettings
from adr_checklist.modules.checklist.inspectors import InspectorDirectory
from adr_checklist.modules.checklist.models import ChecklistForm
from adr_checklist.modules.packaging.archive import Archive

from .exceptions import MailDeliveryError, MailerNotConfiguredError, NoRecipientsError

logger = logging.getLogger(__name__)

SmtpFactory = Callable[..., smtplib.SMTP]


def _details(form: ChecklistForm, archive: Archive) -> list[tuple[str, str]]:
    return [
        ("Driver", form.driver_name or "-"),
        ("Truck", form.truck_plate or "-"),
        ("Trailer", form.trailer_plate or "-"),
        ("Inspection Date", form.inspection_date or "-"),
        ("Inspector", form.inspector_name or "-"),
        ("Remarks", form.remarks.strip() or "-"),
        ("Photos", str(archive.photo_count)),
    ]


def build_subject(form: ChecklistForm) -> str:
    return f"ADR Checklist - {form.driver_name} ({form.truck_plate}/{form.trailer_plate})"


def build_text_body(form: ChecklistForm, archive: Archive) -> str:
    lines = ["Please find attached the ADR Checklist for:", ""]
    lines.extend(f"{label}: {value}" for label, value in _details(form, archive))
    lines.extend(["", "This checklist was generated automatically by the ADR Checklist System."])
    return "\n".join(lines)


def build_html_body(form: ChecklistForm, archive: Archive) -> str:
    rows = "".join(
        "<tr>"
        '<td style="padding: 8px; border: 1px solid #ddd; background-color: #f9f9f9; font-weight: bold;">'
        f"{html.escape(label)}:</td>"
        f'<td style="padding: 8px; border: 1px solid #ddd;">{html.escape(value)}</td>'
        "</tr>"
        for label, value in _details(form, archive)
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #333;">ADR Checklist Report</h2>'
        "<p>Please find attached the ADR Checklist with the following details:</p>"
        f'<table style="border-collapse: collapse; width: 100%; margin: 20px 0;">{rows}</table>'
        '<p style="color: #666; font-size: 12px; margin-top: 30px;">'
        "This email was generated automatically by the ADR Checklist System.</p>"
        "</div>"
    )


class ChecklistMailer:
    def __init__(
        self,
        settings: MailSettings,
        inspectors: InspectorDirectory,
        *,
        smtp_factory: SmtpFactory = smtplib.SMTP,
    ) -> None:
        self._settings = settings
        self._inspectors = inspectors
        self._smtp_factory = smtp_factory

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.host and self._settings.user)

    def build_message(self, form: ChecklistForm, archive: Archive, recipients: list[str]) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = build_subject(form)
        message["From"] = formataddr((self._settings.sender_name, self._settings.user or ""))
        message["To"] = ", ".join(recipients)
        message.set_content(build_text_body(form, archive))
        message.add_alternative(build_html_body(form, archive), subtype="html")
        message.add_attachment(
            archive.content,
            maintype="application",
            subtype="zip",
            filename=archive.file_name,
        )
        return message

    def send(self, form: ChecklistForm, archive: Archive) -> list[str]:
        """Deliver the archive; returns the recipient list."""
        if not self.is_configured:
            raise MailerNotConfiguredError("SMTP host and user must be configured to send e-mail")
        recipients = self._inspectors.recipients_for(form.inspector_name)
        if not recipients:
            raise NoRecipientsError(f"No email recipients found for inspector: {form.inspector_name or '-'}")

        message = self.build_message(form, archive, recipients)
        try:
            with self._smtp_factory(self._settings.host, self._settings.port, timeout=self._settings.timeout) as smtp:
                smtp.ehlo()
                smtp.starttls()
                smtp.ehlo()
                if self._settings.password:
                    smtp.login(self._settings.user, self._settings.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, socket.timeout, OSError) as exc:
            logger.warning("Checklist email to %s failed: %s", ", ".join(recipients), exc)
            raise MailDeliveryError(f"Failed to send email: {exc}") from exc

        logger.info("Checklist email sent to %s recipient(s)", len(recipients))
        return recipients
