"""FastAPI dependency injection integration with Lagom."""

from functools import lru_cache

from lagom import Container

from domain.value_objects.validation_policy import ValidationPolicy
from infrastructure.config import settings
from infrastructure.di.container import create_container


@lru_cache
def get_container() -> Container:
    """Get the DI container instance.

    Cached to ensure singleton behavior across requests.
    """
    return create_container()


def get_validation_policy() -> ValidationPolicy:
    """Build the upload policy from environment configuration."""
    return settings.validation_policy()
