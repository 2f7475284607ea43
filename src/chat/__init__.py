"""Chat sessions on the conversational backend: keys, client, reconciliation."""

from src.chat.cache import SessionKeyCache
from src.chat.client import SessionClient
from src.chat.errors import ErrorKind, RemoteError, classify
from src.chat.identity import derive_session_key
from src.chat.reconciler import Delivered, DeliveryOutcome, Failed, SessionReconciler

__all__ = [
    "Delivered",
    "DeliveryOutcome",
    "ErrorKind",
    "Failed",
    "RemoteError",
    "SessionClient",
    "SessionKeyCache",
    "SessionReconciler",
    "classify",
    "derive_session_key",
]
