"""Mail delivery errors."""


class MailerError(Exception):
    """Base class for mailer errors."""


class MailerNotConfiguredError(MailerError):
    """Raised when no SMTP host or sender is configured."""


class NoRecipientsError(MailerError):
    """Raised when the selected inspector has no report recipients."""


class MailDeliveryError(MailerError):
    """Raised when the SMTP exchange fails."""
