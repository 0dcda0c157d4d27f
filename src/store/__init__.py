"""Freelancer data: in-memory store, calculator and persistence gateway."""

from src.store.freelancer import FreelancerStore
from src.store.gateway import PersistenceGateway, SqlAlchemyGateway
from src.store.session import SessionProvider

__all__ = [
    "FreelancerStore",
    "PersistenceGateway",
    "SessionProvider",
    "SqlAlchemyGateway",
]
