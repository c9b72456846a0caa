"""Shared test fixtures

Sample entities and mock objects available to every test.

Mocks:
- MagicMock(spec=ABC) keeps the port's method signatures
- FakeClock drives toast expiry without sleeping
"""

from unittest.mock import MagicMock

import pytest
from sgrvias.domain.models import (
    Location,
    RepairRequest,
    RequestStatus,
    User,
    Zone,
    ZoneMetadata,
)
from sgrvias.domain.ports import PersistenceGateway, RoleLabelStore
from sgrvias.services.domain_store import DomainStore
from sgrvias.services.notifications import NotificationChannel

from tests.helpers import PNG_DATA_URL, FakeClock

# ========== Sample data ==========


@pytest.fixture
def sample_users() -> list[User]:
    return [
        User(id="u1", name="Eng. Ricardo Souza", role="Manager", zonal=Zone.NORTH),
        User(id="u2", name="Ana Oliveira", role="Collaborator", zonal=Zone.NORTH),
        User(id="u3", name="Carlos Santos", role="Intern", zonal=Zone.NORTH),
        User(id="u4", name="Juliana Lima", role="Manager", zonal=Zone.SOUTH),
    ]


@pytest.fixture
def sample_request() -> RepairRequest:
    return RepairRequest(
        id="req_001",
        protocol="2024.123456",
        sei_number="00.123.456/2024",
        contract="CTR-05/2023",
        description="Recapeamento asfáltico após rompimento de tubulação de esgoto.",
        location=Location(
            latitude=-23.5505,
            longitude=-46.6333,
            address="Av. Paulista, 1000 - São Paulo, SP",
        ),
        visit_date="2024-05-15",
        status=RequestStatus.IN_PROGRESS,
        technician_id="u2",
        zonal=Zone.NORTH,
        created_at="2024-05-10T12:00:00+00:00",
        photo_before=PNG_DATA_URL,
    )


@pytest.fixture
def sample_request_completed() -> RepairRequest:
    return RepairRequest(
        id="req_002",
        protocol="2024.987654",
        sei_number="00.987.654/2024",
        contract="CTR-08/2023",
        description="Manutenção de calçada danificada por raízes de árvore.",
        location=Location(
            latitude=-23.5612,
            longitude=-46.6543,
            address="Rua Augusta, 1500 - São Paulo, SP",
        ),
        visit_date="2024-05-12",
        status=RequestStatus.COMPLETED,
        technician_id="u2",
        zonal=Zone.NORTH,
        created_at="2024-05-08T09:30:00+00:00",
        photo_before=PNG_DATA_URL,
        photo_after=PNG_DATA_URL,
    )


@pytest.fixture
def sample_requests(sample_request, sample_request_completed) -> list[RepairRequest]:
    return [sample_request, sample_request_completed]


@pytest.fixture
def sample_zones() -> list[ZoneMetadata]:
    return [
        ZoneMetadata(id=Zone.NORTH, name="Zonal Norte", manager_id="u1", assistant_id="u2"),
        ZoneMetadata(id=Zone.SOUTH, name="Zonal Sul", manager_id="u4"),
        ZoneMetadata(id=Zone.EAST, name="Zonal Leste"),
        ZoneMetadata(id=Zone.WEST, name="Zonal Oeste"),
    ]


@pytest.fixture
def new_request() -> RepairRequest:
    return RepairRequest(
        id="req_100",
        protocol="2024.555000",
        sei_number="00.555.000/2024",
        contract="CTR-01/2024",
        description="Buraco na via.",
        location=Location(latitude=-23.5, longitude=-46.6, address="Rua Nova, 10"),
        visit_date="2024-06-01",
        status=RequestStatus.OPEN,
        technician_id="u2",
        zonal=Zone.NORTH,
        created_at="2024-06-01T08:00:00+00:00",
        photo_before=PNG_DATA_URL,
    )


# ========== Mock fixtures ==========


@pytest.fixture
def mock_gateway(sample_requests, sample_users, sample_zones) -> MagicMock:
    """PersistenceGateway mock pre-loaded with the sample data"""
    mock = MagicMock(spec=PersistenceGateway)
    mock.list_requests.return_value = list(sample_requests)
    mock.list_users.return_value = list(sample_users)
    mock.list_zones.return_value = list(sample_zones)
    return mock


@pytest.fixture
def mock_role_store() -> MagicMock:
    """RoleLabelStore mock with one custom role"""
    mock = MagicMock(spec=RoleLabelStore)
    mock.load.return_value = {"role_123": "Fiscal de Obras"}
    return mock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifications(clock) -> NotificationChannel:
    return NotificationChannel(ttl_ms=3000, error_ttl_ms=5000, clock=clock)


@pytest.fixture
def store(mock_gateway, mock_role_store, notifications) -> DomainStore:
    """DomainStore loaded from the mocks (load itself queues no toast)"""
    store = DomainStore(mock_gateway, mock_role_store, notifications)
    store.load()
    return store
