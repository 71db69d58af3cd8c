from leadledger.api.routes import brokers, entries, reports

__all__ = [
    "brokers",
    "entries",
    "reports",
]
