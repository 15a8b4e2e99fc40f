"""
Service wiring for Ideas Central.

The storage backend is chosen once here, from STORAGE_BACKEND, and
handed to the record store; nothing else in the package branches on
which backend is active.
"""

from dataclasses import dataclass
from typing import Optional

from ideas_central.classification import Classifier, KeywordClassifier
from ideas_central.config import (
    RESEND_API_KEY,
    STORAGE_BACKEND,
    VALID_BACKENDS,
    is_supabase_configured,
)
from ideas_central.evaluation import EvaluationEngine
from ideas_central.identity import IdentityProvider, InMemoryIdentityProvider
from ideas_central.log import get_logger
from ideas_central.notifications import (
    DecisionNotifier,
    NotificationSender,
    OutboxSender,
    ResendSender,
)
from ideas_central.records import RecordStore
from ideas_central.storage import InMemoryStorage, Storage, SupabaseStorage

logger = get_logger(__name__)


@dataclass
class Services:
    """Everything a caller (CLI, tests) needs, wired together."""
    storage: Storage
    store: RecordStore
    engine: EvaluationEngine
    sender: NotificationSender
    notifier: DecisionNotifier
    identity: IdentityProvider
    classifier: Classifier


def create_storage(backend: Optional[str] = None) -> Storage:
    """
    Create the storage backend.

    Args:
        backend: "memory" or "supabase". Defaults to STORAGE_BACKEND.

    Raises:
        ValueError: If the backend is unknown or Supabase is not configured.
    """
    backend = (backend or STORAGE_BACKEND).lower()
    if backend not in VALID_BACKENDS:
        raise ValueError(f"Unknown storage backend {backend!r}; expected one of {', '.join(VALID_BACKENDS)}")

    if backend == "supabase":
        if not is_supabase_configured():
            raise ValueError("STORAGE_BACKEND=supabase but SUPABASE_URL/SUPABASE_KEY are not configured")
        return SupabaseStorage()
    return InMemoryStorage()


def create_notification_sender(api_key: Optional[str] = None) -> NotificationSender:
    """Resend when an API key is configured, otherwise the in-memory outbox."""
    api_key = RESEND_API_KEY if api_key is None else api_key
    if api_key:
        return ResendSender(api_key=api_key)
    return OutboxSender()


def create_services(
    backend: Optional[str] = None,
    storage: Optional[Storage] = None,
    sender: Optional[NotificationSender] = None,
    identity: Optional[IdentityProvider] = None,
    **engine_options,
) -> Services:
    """
    Wire storage, record store, engine and notifier together.

    Any component passed in is used as is (tests pass fakes).
    """
    storage = storage or create_storage(backend)
    sender = sender or create_notification_sender()

    store = RecordStore(storage)
    notifier = DecisionNotifier(sender)
    store.subscribe(notifier)

    services = Services(
        storage=storage,
        store=store,
        engine=EvaluationEngine(store, **engine_options),
        sender=sender,
        notifier=notifier,
        identity=identity or InMemoryIdentityProvider(),
        classifier=KeywordClassifier(),
    )
    logger.debug("Services ready: storage=%s sender=%s", storage.name, sender.name)
    return services
