"""Ports - interface definitions (ABC)

Each port is the contract between the services layer and an external system.
Adapters inherit from these ABCs; a missing method is detected as soon as the
adapter is instantiated.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from sgrvias.domain.models import RepairRequest, User, ZoneMetadata


class PersistenceGateway(ABC):
    """
    Sole boundary between the domain store and durable storage.

    Every failure is raised as PersistenceError. Implementations hold no cached
    state, never retry and never roll back partially.
    """

    # ── repair_requests ──────────────────────────────────────────────────────

    @abstractmethod
    def list_requests(self) -> list[RepairRequest]:
        """All requests, most recent first"""
        pass

    @abstractmethod
    def create_request(self, request: RepairRequest) -> None:
        """Insert a new request"""
        pass

    @abstractmethod
    def update_request(self, request: RepairRequest) -> None:
        """Replace every field of an existing request"""
        pass

    @abstractmethod
    def delete_request(self, request_id: str) -> None:
        """Delete a request. Deleting an absent id is a no-op"""
        pass

    # ── users ────────────────────────────────────────────────────────────────

    @abstractmethod
    def list_users(self) -> list[User]:
        pass

    @abstractmethod
    def create_user(self, user: User) -> None:
        pass

    @abstractmethod
    def update_user(self, user: User) -> None:
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        pass

    # ── zonals ───────────────────────────────────────────────────────────────

    @abstractmethod
    def list_zones(self) -> list[ZoneMetadata]:
        pass

    @abstractmethod
    def upsert_zone(self, zone: ZoneMetadata) -> None:
        pass


class RoleLabelStore(ABC):
    """Client-side key-value storage for the role-label dictionary"""

    @abstractmethod
    def load(self) -> dict[str, str]:
        """Stored custom labels (may be empty)"""
        pass

    @abstractmethod
    def save(self, labels: Mapping[str, str]) -> None:
        """Overwrite the stored dictionary"""
        pass


class RequestReportRenderer(ABC):
    """Report export (CSV, PDF)"""

    media_type: str = "application/octet-stream"

    @abstractmethod
    def render(
        self,
        requests: Sequence[RepairRequest],
        users: Sequence[User],
        zones: Sequence[ZoneMetadata],
        role_labels: Mapping[str, str],
    ) -> bytes:
        """Render a read-only sequence of requests"""
        pass
