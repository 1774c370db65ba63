"""Composition of multipart HTML emails with a plain-text alternative."""
import logging
from abc import ABC, abstractmethod
from email.message import EmailMessage
from string import Template
from typing import Any, Dict, Optional

from storefront.mail.html_text import html_to_plain
from storefront.mail.schemas import EmailInfo, EmailPropertyType, EmailTarget
from storefront.mail.transport import MailSender
from storefront.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SCHEMA_PROPERTY_KEYS = {prop.value for prop in EmailPropertyType}


class MessageCreator(ABC):
    """Builds a message from a props mapping and hands it to a MailSender.

    ``props`` must hold an EmailTarget under ``EmailPropertyType.USER`` and
    an EmailInfo under ``EmailPropertyType.INFO``; any other entries are
    available to ``build_message_body``.
    """

    def __init__(self, mail_sender: Optional[MailSender] = None):
        self.mail_sender = mail_sender or MailSender()

    @abstractmethod
    def build_message_body(self, info: EmailInfo, props: Dict[str, Any]) -> str:
        """Render the HTML body when the EmailInfo does not carry one."""
        pass

    def send_message(self, props: Dict[str, Any]) -> None:
        """Build the message and deliver it. Delivery errors propagate."""
        message = self.build_message(props)
        self.mail_sender.send(message)

    def build_message(self, props: Dict[str, Any]) -> EmailMessage:
        target: EmailTarget = props[EmailPropertyType.USER.value]
        info: EmailInfo = props[EmailPropertyType.INFO.value]

        message = EmailMessage()
        message["To"] = target.email_address
        message["From"] = info.from_address
        message["Subject"] = info.subject
        if target.bcc_addresses:
            message["Bcc"] = ", ".join(target.bcc_addresses)
        if target.cc_addresses:
            message["Cc"] = ", ".join(target.cc_addresses)

        message_body = info.message_body
        if message_body is None:
            message_body = self.build_message_body(info, props)

        message.set_content(html_to_plain(message_body), charset=info.encoding)
        message.add_alternative(message_body, subtype="html", charset=info.encoding)

        for attachment in info.attachments:
            maintype, _, subtype = attachment.mime_type.partition("/")
            message.add_attachment(
                attachment.data,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return message


class TemplateMessageCreator(MessageCreator):
    """Renders ``EmailInfo.email_template`` with the extra props as $placeholders."""

    def build_message_body(self, info: EmailInfo, props: Dict[str, Any]) -> str:
        if info.email_template is None:
            raise ValueError(f"No message body or email template supplied for '{info.subject}'")
        values = {key: value for key, value in props.items() if key not in SCHEMA_PROPERTY_KEYS}
        return Template(info.email_template).safe_substitute(values)


class NullMessageCreator(MessageCreator):
    """Builds messages but only logs them; used when mail is disabled."""

    def build_message_body(self, info: EmailInfo, props: Dict[str, Any]) -> str:
        return info.email_template or ""

    def send_message(self, props: Dict[str, Any]) -> None:
        message = self.build_message(props)
        logger.info(f"Mail disabled, not sending '{message['Subject']}' to {message['To']}")
        logger.debug(message.as_string())


def get_message_creator(settings: Optional[Settings] = None) -> MessageCreator:
    """Return the message creator for the configured mail mode."""
    settings = settings or get_settings()
    if not settings.mail_enabled:
        return NullMessageCreator()
    return TemplateMessageCreator(MailSender(settings))
