"""Domain-specific exception classes"""


class SgrViasError(Exception):
    """Base exception for SGR-Vias"""

    pass


class ConfigLoadError(SgrViasError):
    """Configuration could not be loaded"""

    pass


class ValidationError(SgrViasError):
    """Business-rule violation caught before any storage call"""

    pass


class PersistenceError(SgrViasError):
    """Storage-layer failure (connectivity, constraint, schema)"""

    pass


class ExportError(SgrViasError):
    """Report export failure (CSV/PDF)"""

    pass
