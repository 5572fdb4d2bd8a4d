from flowmail_core.mail.composer import MailCreator
from flowmail_core.mail.default import DefaultMailCreator, PlainTextMailCreator
from flowmail_core.mail.links import ServerContext, server_context_from_config
from flowmail_core.mail.message import EmailMessage
from flowmail_core.mail.plugins import (
    ComposerEntry,
    load_composer,
    load_composer_manifest,
    register_composers,
    registry_from_config,
)
from flowmail_core.mail.registry import DEFAULT_MAIL_CREATOR, MailCreatorRegistry

__all__ = [
    "ComposerEntry",
    "DEFAULT_MAIL_CREATOR",
    "DefaultMailCreator",
    "EmailMessage",
    "MailCreator",
    "MailCreatorRegistry",
    "PlainTextMailCreator",
    "ServerContext",
    "load_composer",
    "load_composer_manifest",
    "register_composers",
    "registry_from_config",
    "server_context_from_config",
]
