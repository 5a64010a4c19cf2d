"""
Owner notifications over SMTP.
Both notify_* calls return immediately: the message is handed to a small
thread pool and any delivery error is logged on that thread, never raised
back into the RC operation that triggered it.
Without MAIL_HOST configured, messages are logged and dropped.
"""

import smtplib
from concurrent.futures import ThreadPoolExecutor
from email.message import EmailMessage
from typing import Optional
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

CREATED_SUBJECT = "RC Registered Successfully"
CREATED_BODY = """Hello {name},

Your vehicle registration has been successfully added.
RC Number: {rc_number}

Thank you,
RC Verification System
"""

TRANSFERRED_SUBJECT = "RC Ownership Transfer Complete"
TRANSFERRED_BODY = """Hello {name},

The ownership of the vehicle with RC Number {rc_number}
has been successfully updated under your name.

Thank you,
RC Verification System
"""


class EmailNotifier:
    def __init__(self, executor: Optional[ThreadPoolExecutor] = None):
        self._executor = executor or ThreadPoolExecutor(
            max_workers=settings.MAIL_WORKERS, thread_name_prefix="rc-mail"
        )

    def notify_created(self, to_email: Optional[str], owner_name: str, rc_number: str):
        self._dispatch(to_email, CREATED_SUBJECT,
                       CREATED_BODY.format(name=owner_name, rc_number=rc_number))

    def notify_transferred(self, to_email: Optional[str], owner_name: str, rc_number: str):
        self._dispatch(to_email, TRANSFERRED_SUBJECT,
                       TRANSFERRED_BODY.format(name=owner_name, rc_number=rc_number))

    def _dispatch(self, to_email: Optional[str], subject: str, body: str):
        if not to_email or not to_email.strip():
            return
        self._executor.submit(self._send_safely, to_email, subject, body)

    def build_message(self, to_email: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        if settings.MAIL_SENDER:
            msg["From"] = settings.MAIL_SENDER
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def _send_safely(self, to_email: str, subject: str, body: str):
        # Header errors (CR/LF in an address) surface here too, off the request path
        try:
            self.send(self.build_message(to_email, subject, body))
        except Exception as e:
            logger.warning(f"[MAIL] Delivery to {to_email!r} failed ({subject}): {e}")

    def send(self, msg: EmailMessage):
        """Blocking SMTP send. Runs on the notifier's worker threads."""
        if not settings.MAIL_HOST:
            logger.info(f"[MAIL] (no MAIL_HOST configured) {msg['Subject']} → {msg['To']}")
            return
        with smtplib.SMTP(settings.MAIL_HOST, settings.MAIL_PORT, timeout=10) as server:
            if settings.MAIL_USE_TLS:
                server.starttls()
            if settings.MAIL_USERNAME:
                server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD or "")
            server.send_message(msg)
        logger.info(f"[MAIL] {msg['Subject']} → {msg['To']}")

    def shutdown(self):
        self._executor.shutdown(wait=True)


email_notifier = EmailNotifier()
