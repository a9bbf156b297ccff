"""
Dependency Injection Container for KTM Transit Advisor.

This module provides a lightweight dependency injection container that manages
the lifecycle and dependencies of service objects throughout the application.
Tests swap in a fake route service or generator through the container.
"""

import logging
from typing import Optional
from openai import OpenAI

from config import get_config
from route_generator import OpenAIRouteGenerator, RouteTextGenerator
from route_service import RouteService

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Dependency injection container for managing application services.

    This container provides lazy initialization of services and caches instances
    to ensure singleton behavior for stateless services.
    """

    def __init__(self):
        """Initialize the service container with empty caches."""
        self._config = None
        self._openai_client = None
        self._route_generator = None
        self._route_service = None
        self._test_service = None  # For test mocking

    def get_config(self):
        """Get the application configuration (singleton)."""
        if self._config is None:
            self._config = get_config()
        return self._config

    def get_openai_client(self) -> OpenAI:
        """
        Get OpenAI client instance (singleton).

        Returns:
            Configured OpenAI client

        Raises:
            ValueError: If OPENAI_API_KEY is not configured
        """
        if self._openai_client is None:
            config = self.get_config()
            api_key = config.openai_api_key
            if not api_key:
                raise ValueError("OPENAI_API_KEY not found in configuration")
            self._openai_client = OpenAI(api_key=api_key)
            logger.info("OpenAI client initialized")
        return self._openai_client

    def get_route_generator(self) -> RouteTextGenerator:
        """Get the route text generator (singleton)."""
        if self._route_generator is None:
            self._route_generator = OpenAIRouteGenerator(openai_client=self.get_openai_client())
            logger.info(f"Route generator initialized with model {self._route_generator.model}")
        return self._route_generator

    def set_route_generator(self, generator: RouteTextGenerator):
        """Use a specific generator (e.g. a fake in tests) for new route services."""
        self._route_generator = generator
        self._route_service = None

    def get_route_service(self) -> RouteService:
        """
        Get the route service (singleton).

        Returns the test override when one is set.
        """
        if self._test_service is not None:
            return self._test_service
        if self._route_service is None:
            self._route_service = RouteService(self.get_route_generator())
            logger.info("RouteService initialized")
        return self._route_service

    def set_test_service(self, service):
        """
        Set a mock route service for testing purposes.

        Args:
            service: Mock service instance to use instead of the real one
        """
        self._test_service = service

    def clear_test_service(self):
        """Clear the test service override."""
        self._test_service = None

    def reset(self):
        """
        Reset all cached instances. Useful for testing.

        This forces recreation of all services on next access.
        """
        self._config = None
        self._openai_client = None
        self._route_generator = None
        self._route_service = None
        self._test_service = None
        logger.info("Service container reset")


# Global container instance
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container instance (singleton).

    Returns:
        ServiceContainer instance
    """
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container():
    """
    Reset the global container. Useful for testing.

    Forces recreation of all services on next access.
    """
    global _container
    if _container is not None:
        _container.reset()
    _container = None
