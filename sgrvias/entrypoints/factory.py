"""Factory - dependency wiring

Builds the adapters, the notification channel and the DomainStore. This is
the composition root: the store it returns is passed to consumers
explicitly.
"""

import logging

from sgrvias.adapters.local_json import LocalJsonGateway, LocalJsonRoleLabelStore
from sgrvias.config import BACKEND_FIRESTORE, AppConfig
from sgrvias.domain.ports import PersistenceGateway
from sgrvias.services.domain_store import DomainStore
from sgrvias.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)


def create_gateway(config: AppConfig) -> PersistenceGateway:
    """PersistenceGateway for the configured backend"""
    if config.backend == BACKEND_FIRESTORE:
        from google.cloud import firestore

        from sgrvias.adapters.firestore_gateway import FirestoreGateway

        logger.info("Using Firestore backend: project_id=%s", config.project_id)
        return FirestoreGateway(
            firestore.Client(project=config.project_id),
            timeout=config.gateway_timeout,
        )

    logger.info("Using local JSON backend: path=%s", config.data_path)
    return LocalJsonGateway(config.data_path)


def create_store(config: AppConfig | None = None, load: bool = True) -> DomainStore:
    """
    Build a DomainStore (all dependencies wired).

    Args:
        config: application settings (None reads the environment)
        load: read every collection from storage before returning

    Returns:
        DomainStore: ready-to-use store

    Raises:
        ConfigLoadError: required settings are missing or invalid
        PersistenceError: initial load failed
    """
    if config is None:
        config = AppConfig.from_env()

    notifications = NotificationChannel(
        ttl_ms=config.toast_ttl_ms,
        error_ttl_ms=config.toast_error_ttl_ms,
    )
    store = DomainStore(
        gateway=create_gateway(config),
        role_store=LocalJsonRoleLabelStore(config.role_labels_path),
        notifications=notifications,
    )
    if load:
        store.load()

    logger.info("Store created successfully")
    return store
