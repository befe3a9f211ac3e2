"""Infrastructure - Database, storage, mail, logging."""

from showroom.infra.database import close_db_engine, get_db_session
from showroom.infra.logging import get_logger, setup_logging
from showroom.infra.mailer import MailTransport, OutgoingMail, build_mail_transport
from showroom.infra.storage import StorageClient, StoragePathError, get_storage_client

__all__ = [
    "get_db_session",
    "close_db_engine",
    "StorageClient",
    "StoragePathError",
    "get_storage_client",
    "MailTransport",
    "OutgoingMail",
    "build_mail_transport",
    "setup_logging",
    "get_logger",
]
