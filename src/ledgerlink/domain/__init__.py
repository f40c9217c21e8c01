"""Domain layer for ledgerlink application."""

_SERVICES = {
    "LedgerStore": "ledgerlink.domain.ledger",
    "CategoryRegistry": "ledgerlink.domain.category",
    "AuthService": "ledgerlink.domain.auth",
    "AccountService": "ledgerlink.domain.account",
    "ReportService": "ledgerlink.domain.reports",
}

__all__ = list(_SERVICES)


# Import services lazily: the database layer imports domain.entities, and the
# services import the database layer
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
