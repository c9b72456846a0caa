"""Domain layer - models and interfaces with no external dependencies"""

from sgrvias.domain.errors import (
    ConfigLoadError,
    ExportError,
    PersistenceError,
    SgrViasError,
    ValidationError,
)
from sgrvias.domain.models import (
    BUILTIN_ROLE_LABELS,
    DEFAULT_ZONE_NAMES,
    UNRESOLVED,
    Location,
    RepairRequest,
    RequestStatus,
    Severity,
    Toast,
    User,
    Zone,
    ZoneMetadata,
)
from sgrvias.domain.ports import (
    PersistenceGateway,
    RequestReportRenderer,
    RoleLabelStore,
)

__all__ = [
    # Models
    "RequestStatus",
    "Zone",
    "Severity",
    "Location",
    "RepairRequest",
    "User",
    "ZoneMetadata",
    "Toast",
    "UNRESOLVED",
    "BUILTIN_ROLE_LABELS",
    "DEFAULT_ZONE_NAMES",
    # Errors
    "SgrViasError",
    "ConfigLoadError",
    "ValidationError",
    "PersistenceError",
    "ExportError",
    # Ports
    "PersistenceGateway",
    "RoleLabelStore",
    "RequestReportRenderer",
]
