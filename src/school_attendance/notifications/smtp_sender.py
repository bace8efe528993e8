from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from datetime import date
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from .adapter import NotificationSender
from .model import SendResult
from .templates import absence_notice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    user: str = ""
    password: str = ""
    from_name: str = "School System"
    use_tls: bool = True
    timeout: float = 30.0


class SmtpNotificationSender(NotificationSender):
    """Email absence notices over SMTP (STARTTLS)."""

    def __init__(self, config: SmtpConfig):
        self._config = config

    def send(
        self,
        student_id: int,
        recipient: str,
        absence_date: date,
        school_label: str,
        *,
        student_name: str = "",
    ) -> SendResult:
        notice = absence_notice(student_name, absence_date, school_label)

        msg = EmailMessage()
        msg["Subject"] = notice.subject
        msg["From"] = formataddr((self._config.from_name, self._config.user))
        msg["To"] = recipient
        msg["Message-ID"] = make_msgid(domain=(self._config.user.split("@")[-1] or None))
        msg.set_content(notice.text)
        msg.add_alternative(notice.html, subtype="html")

        cfg = self._config
        try:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout) as smtp:
                if cfg.use_tls:
                    smtp.starttls()
                if cfg.user:
                    smtp.login(cfg.user, cfg.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Absence notice for student %s to %s failed: %s", student_id, recipient, e)
            return SendResult(success=False, error=str(e))

        logger.info("Absence notice for student %s sent to %s", student_id, recipient)
        return SendResult(success=True, message_id=msg["Message-ID"])
