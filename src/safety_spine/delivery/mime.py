"""MIME assembly: one multipart/mixed message, text body plus attachments."""

from __future__ import annotations

from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid

from safety_spine.delivery.protocol import Attachment


def build_message(
    sender: str,
    recipients: list[str],
    subject: str,
    body: str,
    attachments: list[Attachment],
) -> MIMEMultipart:
    """Build the message; attachments are base64 encoded."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = ", ".join(recipients)
    msg["Date"] = formatdate(localtime=False)
    msg["Message-ID"] = make_msgid(domain=sender.rsplit("@", 1)[-1] or None)

    msg.attach(MIMEText(body, "plain", "utf-8"))

    for attachment in attachments:
        _, _, subtype = attachment.mime_type.partition("/")
        part = MIMEApplication(attachment.content, _subtype=subtype or "octet-stream")
        part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
        msg.attach(part)

    return msg
