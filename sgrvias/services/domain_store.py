"""DomainStore - session-wide in-memory state and the confirm-then-apply protocol

Mutation flow (identical for every entity):
  1. local business-rule checks      → ValidationError + error toast, no storage call
  2. PersistenceGateway write        → on failure: error toast, state untouched, re-raise
  3. swap in a new immutable snapshot → success toast, listeners notified

Readers only ever see a whole StoreSnapshot, so a half-applied mutation is
never visible. Request writes run concurrently and resolve as
last-write-wins on the same entity. User, zone and role mutations run one at a
time, checks through swap, so one Manager per zone, roles in use and unique
role keys hold under concurrent callers.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from sgrvias.domain.errors import ValidationError
from sgrvias.domain.models import (
    BUILTIN_ROLE_LABELS,
    MANAGER_ROLE,
    RepairRequest,
    RequestStatus,
    Severity,
    User,
    Zone,
    ZoneMetadata,
    new_role_key,
)
from sgrvias.domain.ports import PersistenceGateway, RoleLabelStore
from sgrvias.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)

Listener = Callable[["StoreSnapshot"], None]


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of every collection at one point in time"""

    requests: tuple[RepairRequest, ...] = ()
    users: tuple[User, ...] = ()
    zones: tuple[ZoneMetadata, ...] = ()
    role_labels: Mapping[str, str] = field(default_factory=lambda: BUILTIN_ROLE_LABELS)


def _merge_role_labels(custom: Mapping[str, str]) -> Mapping[str, str]:
    extra = {k: v for k, v in custom.items() if k not in BUILTIN_ROLE_LABELS}
    return MappingProxyType({**BUILTIN_ROLE_LABELS, **extra})


class DomainStore:
    """
    Authoritative in-memory copy of all entities for the running session.

    Owned by the composition root (see entrypoints.factory) and passed to
    consumers explicitly.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        role_store: RoleLabelStore,
        notifications: NotificationChannel,
    ) -> None:
        """
        Args:
            gateway: remote persistence for requests, users and zones
            role_store: local key-value storage for the role-label dictionary
            notifications: toast channel receiving every mutation outcome
        """
        self._gateway = gateway
        self._role_store = role_store
        self._notifications = notifications
        self._lock = threading.Lock()
        # held across check, write and swap of user, zone and role mutations
        self._org_lock = threading.RLock()
        self._snapshot = StoreSnapshot()
        self._listeners: list[Listener] = []

    # ── reads ────────────────────────────────────────────────────────────────

    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def requests(self) -> tuple[RepairRequest, ...]:
        return self._snapshot.requests

    @property
    def users(self) -> tuple[User, ...]:
        return self._snapshot.users

    @property
    def zones(self) -> tuple[ZoneMetadata, ...]:
        return self._snapshot.zones

    @property
    def role_labels(self) -> Mapping[str, str]:
        return self._snapshot.role_labels

    @property
    def notifications(self) -> NotificationChannel:
        return self._notifications

    def get_request(self, request_id: str) -> RepairRequest | None:
        return next((r for r in self._snapshot.requests if r.id == request_id), None)

    def get_user(self, user_id: str) -> User | None:
        return next((u for u in self._snapshot.users if u.id == user_id), None)

    def get_zonal_name(self, zone_id: Zone | str) -> str:
        """Display name of a zone, or the raw id when no metadata exists"""
        raw = zone_id.value if isinstance(zone_id, Zone) else str(zone_id)
        for zone in self._snapshot.zones:
            if zone.id.value == raw:
                return zone.name
        return raw

    def get_role_label(self, key: str) -> str:
        """Human-readable role label, or the raw key when unknown"""
        return self._snapshot.role_labels.get(key, key)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new snapshot after every commit.

        Returns:
            callable that unregisters the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ── loading ──────────────────────────────────────────────────────────────

    def load(self) -> StoreSnapshot:
        """
        Read every collection from storage and replace the snapshot.

        Zones missing from storage are seeded from the defaults.

        Raises:
            PersistenceError: storage read failed (previous snapshot kept)
        """
        try:
            requests = self._gateway.list_requests()
            users = self._gateway.list_users()
            zones = {z.id: z for z in self._gateway.list_zones()}
            for zone_id in Zone:
                if zone_id not in zones:
                    seeded = ZoneMetadata.default(zone_id)
                    self._gateway.upsert_zone(seeded)
                    zones[zone_id] = seeded
                    logger.info("Seeded zone metadata: id=%s", zone_id.value)
            custom_labels = self._role_store.load()
        except Exception as e:
            logger.error("Failed to load store: %s", e)
            self._notifications.notify(f"Erro ao carregar dados: {e}", Severity.ERROR)
            raise

        snapshot = StoreSnapshot(
            requests=tuple(requests),
            users=tuple(users),
            zones=tuple(zones[z] for z in Zone),
            role_labels=_merge_role_labels(custom_labels),
        )
        self._swap(lambda _current: snapshot)
        logger.info(
            "Store loaded: requests=%d, users=%d, custom_roles=%d",
            len(requests),
            len(users),
            len(custom_labels),
        )
        return snapshot

    # ── repair requests ──────────────────────────────────────────────────────

    def submit_request(self, **fields) -> RepairRequest:
        """
        Build a request from a field submission (see RepairRequest.new) and add it.

        Returns:
            the created request
        """
        try:
            request = RepairRequest.new(**fields)
        except ValidationError as e:
            self._reject(str(e))
        self.add_request(request)
        return request

    def add_request(self, request: RepairRequest) -> None:
        """Create a request and put it first in the collection"""
        current = self._snapshot
        if any(r.id == request.id for r in current.requests):
            self._reject(f"Solicitação {request.id} já existe.")
        if not any(u.id == request.technician_id for u in current.users):
            self._reject(f"Técnico {request.technician_id or '(vazio)'} não encontrado.")

        self._mutate(
            lambda: self._gateway.create_request(request),
            lambda s: replace(s, requests=(request, *s.requests)),
            success=f"Solicitação {request.protocol} registrada com sucesso.",
            failure="Erro ao salvar solicitação",
        )

    def update_request(self, request: RepairRequest) -> None:
        """Replace an existing request (whole entity, no partial updates)"""
        if self.get_request(request.id) is None:
            self._reject(f"Solicitação {request.id} não encontrada.")

        self._mutate(
            lambda: self._gateway.update_request(request),
            lambda s: replace(
                s,
                requests=tuple(request if r.id == request.id else r for r in s.requests),
            ),
            success=f"Solicitação {request.protocol} atualizada.",
            failure="Erro ao atualizar solicitação",
        )

    def delete_request(self, request_id: str) -> None:
        self._mutate(
            lambda: self._gateway.delete_request(request_id),
            lambda s: replace(
                s, requests=tuple(r for r in s.requests if r.id != request_id)
            ),
            success="Solicitação excluída.",
            failure="Erro ao excluir solicitação",
        )

    def change_status(self, request_id: str, status: RequestStatus) -> RepairRequest:
        updated = replace(self._require_request(request_id), status=RequestStatus(status))
        self.update_request(updated)
        return updated

    def update_address(self, request_id: str, address: str) -> RepairRequest:
        request = self._require_request(request_id)
        updated = replace(request, location=replace(request.location, address=address))
        self.update_request(updated)
        return updated

    def attach_after_photo(self, request_id: str, photo: str) -> RepairRequest:
        """Store the "after" photo; supplying it completes the request"""
        if not photo:
            self._reject("Foto posterior não informada.")
        updated = replace(
            self._require_request(request_id),
            photo_after=photo,
            status=RequestStatus.COMPLETED,
        )
        self.update_request(updated)
        return updated

    # ── users ────────────────────────────────────────────────────────────────

    def add_user(self, user: User) -> None:
        with self._org_lock:
            if self.get_user(user.id) is not None:
                self._reject(f"Colaborador {user.id} já existe.")
            self._check_role(user)
            self._check_single_manager(user)

            self._mutate(
                lambda: self._gateway.create_user(user),
                lambda s: replace(s, users=(*s.users, user)),
                success=f"Colaborador {user.name} cadastrado.",
                failure="Erro ao salvar colaborador",
            )

    def update_user(self, user: User) -> None:
        with self._org_lock:
            if self.get_user(user.id) is None:
                self._reject(f"Colaborador {user.id} não encontrado.")
            self._check_role(user)
            self._check_single_manager(user)

            self._mutate(
                lambda: self._gateway.update_user(user),
                lambda s: replace(
                    s, users=tuple(user if u.id == user.id else u for u in s.users)
                ),
                success=f"Colaborador {user.name} atualizado.",
                failure="Erro ao atualizar colaborador",
            )

    def delete_user(self, user_id: str) -> None:
        """
        Delete a user. References held by zones and requests are left dangling
        and resolve to the "Não definido" placeholder in derived views.
        """
        with self._org_lock:
            self._mutate(
                lambda: self._gateway.delete_user(user_id),
                lambda s: replace(s, users=tuple(u for u in s.users if u.id != user_id)),
                success="Colaborador removido.",
                failure="Erro ao remover colaborador",
            )

    # ── zones ────────────────────────────────────────────────────────────────

    def update_zonal(self, zone: ZoneMetadata) -> None:
        def _apply(s: StoreSnapshot) -> StoreSnapshot:
            if any(z.id == zone.id for z in s.zones):
                return replace(
                    s, zones=tuple(zone if z.id == zone.id else z for z in s.zones)
                )
            return replace(s, zones=(*s.zones, zone))

        with self._org_lock:
            self._mutate(
                lambda: self._gateway.upsert_zone(zone),
                _apply,
                success=f"Configurações da {zone.name} salvas.",
                failure="Erro ao salvar zonal",
            )

    # ── role labels ──────────────────────────────────────────────────────────

    def add_role(self, label: str) -> str:
        """
        Add a custom role.

        Returns:
            the generated role key ("role_<epoch-ms>")
        """
        label = (label or "").strip()
        if not label:
            self._reject("Informe o nome da função.")

        with self._org_lock:
            key = new_role_key(set(self._snapshot.role_labels))
            custom = {**self._custom_labels(self._snapshot.role_labels), key: label}

            self._mutate(
                lambda: self._role_store.save(custom),
                lambda s: replace(
                    s, role_labels=_merge_role_labels({**s.role_labels, key: label})
                ),
                success=f"Função {label} adicionada.",
                failure="Erro ao salvar função",
            )
        return key

    def remove_role(self, key: str) -> None:
        """
        Remove a custom role.

        Raises:
            ValidationError: built-in role, unknown key, or role still in use
        """
        if key in BUILTIN_ROLE_LABELS:
            self._reject("Funções padrão não podem ser removidas.")

        with self._org_lock:
            current = self._snapshot
            if key not in current.role_labels:
                self._reject(f"Função {key} não encontrada.")
            holders = [u for u in current.users if u.role == key]
            if holders:
                self._reject(
                    f"A função {current.role_labels[key]} está em uso por "
                    f"{len(holders)} colaborador(es): {', '.join(u.name for u in holders)}."
                )

            custom = {
                k: v
                for k, v in self._custom_labels(current.role_labels).items()
                if k != key
            }
            self._mutate(
                lambda: self._role_store.save(custom),
                lambda s: replace(
                    s,
                    role_labels=_merge_role_labels(
                        {k: v for k, v in s.role_labels.items() if k != key}
                    ),
                ),
                success="Função removida.",
                failure="Erro ao remover função",
            )

    # ── internals ────────────────────────────────────────────────────────────

    @staticmethod
    def _custom_labels(labels: Mapping[str, str]) -> dict[str, str]:
        return {k: v for k, v in labels.items() if k not in BUILTIN_ROLE_LABELS}

    def _require_request(self, request_id: str) -> RepairRequest:
        request = self.get_request(request_id)
        if request is None:
            self._reject(f"Solicitação {request_id} não encontrada.")
        return request

    def _check_role(self, user: User) -> None:
        if user.role not in self._snapshot.role_labels:
            self._reject(f"Função {user.role} não encontrada.")

    def _check_single_manager(self, user: User) -> None:
        """At most one Manager per zone (the user being edited is excluded)"""
        if user.role != MANAGER_ROLE:
            return
        for other in self._snapshot.users:
            if other.id != user.id and other.role == MANAGER_ROLE and other.zonal == user.zonal:
                self._reject(
                    f"A {self.get_zonal_name(user.zonal)} já possui um gestor: "
                    f"{other.name} ({other.id})."
                )

    def _reject(self, message: str) -> None:
        logger.warning("Mutation rejected: %s", message)
        self._notifications.notify(message, Severity.ERROR)
        raise ValidationError(message)

    def _mutate(
        self,
        write: Callable[[], None],
        apply: Callable[[StoreSnapshot], StoreSnapshot],
        success: str,
        failure: str,
    ) -> None:
        """Run the storage write, then commit `apply` and queue exactly one toast"""
        try:
            write()
        except Exception as e:
            logger.error("%s: %s", failure, e)
            self._notifications.notify(f"{failure}: {e}", Severity.ERROR)
            raise
        self._swap(apply)
        logger.info("Committed: %s", success)
        self._notifications.notify(success, Severity.SUCCESS)

    def _swap(self, apply: Callable[[StoreSnapshot], StoreSnapshot]) -> None:
        with self._lock:
            self._snapshot = apply(self._snapshot)
            snapshot = self._snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Store listener failed")
