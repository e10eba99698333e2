"""Entity mapper: persist and fetch orchestration."""

from kvmapper.mapper.mapper import EntityMapper

__all__ = [
    "EntityMapper",
]
