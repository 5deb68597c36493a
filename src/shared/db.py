"""Schema management for SQL-backed Protean providers.

The in-memory provider needs no schema; for ``sqlite`` and ``postgresql``
providers the tables of every aggregate and entity are created or dropped.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def _register_models(domain: Domain, provider) -> None:
    # Touching ``_dao`` makes Protean build the SQLAlchemy model for the element
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every SQL provider configured on the domain."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.create_all(engine)


def drop_db(domain: Domain) -> None:
    """Drop tables for every SQL provider configured on the domain."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)


def reset_data(domain: Domain) -> None:
    """Wipe all stored records and events of a domain. Used between tests."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()
        domain.event_store.store._data_reset()
