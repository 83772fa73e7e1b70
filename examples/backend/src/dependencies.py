"""Dependency injection container and providers."""

from dependency_injector import containers
from dependency_injector import providers
from sqlalchemy.ext.asyncio import create_async_engine

from namerec.oino import Api
from namerec.oino import OINOFactory
from src.exceptions import ResourceNotFoundError


class Container(containers.DeclarativeContainer):
    """Application DI container."""

    # Configuration
    config = providers.Configuration()

    # Database engine (async)
    # Engine is created lazily when first accessed, after database_url is set
    engine = providers.Singleton(
        create_async_engine,
        config.database_url,
        echo=False,
    )

    # Factory shared by all resources (one dialect registry, one set of protocol constants)
    factory = providers.Singleton(OINOFactory)

    # Resources by name, filled at startup once their tables are introspected
    apis = providers.Singleton(dict)


# Global container instance
container = Container()


def get_factory() -> OINOFactory:
    """
    FastAPI dependency to get the factory.

    Returns:
        OINO factory
    """
    return container.factory()


def get_api(resource: str) -> Api:
    """
    FastAPI dependency to get the resource named in the path.

    Raises:
        ResourceNotFoundError: If no resource is configured under this name
    """
    apis: dict[str, Api] = container.apis()
    if resource not in apis:
        raise ResourceNotFoundError(resource)
    return apis[resource]
