"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators (image
client, storage backends, signer lookup, content registry, canvases) live in
the ServiceCache; request-scoped services are built per request around the
database session.

Dependencies: base0.configs, base0.application, base0.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from base0.application.services import (
    BalanceService,
    CanvasService,
    ContentService,
    FilecoinPromptStore,
    GenerationService,
    GenerationWorkflow,
    HistoryService,
    PaymentService,
)
from base0.boundary.chain.registry import ContentRegistry
from base0.boundary.db import get_async_db
from base0.boundary.image_api.base import ImageClient
from base0.boundary.storage.factory import StorageBackendFactory
from base0.configs import Settings, get_settings
from base0.core.signer import SignerProvider


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._image_client = None
        self._storage_backends = None
        self._signers = None
        self._content_registry = None
        self._canvas_service = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def image_client(self) -> ImageClient:
        """Get cached image client (raises ConfigurationError without an API key)."""
        if self._image_client is None:
            from base0.boundary.image_api.factory import get_image_client

            self._image_client = get_image_client(self.settings.image_api)
        return self._image_client

    @property
    def storage_backends(self) -> StorageBackendFactory:
        """Get cached storage backend factory."""
        if self._storage_backends is None:
            self._storage_backends = StorageBackendFactory(self.settings.filecoin)
        return self._storage_backends

    @property
    def signers(self) -> SignerProvider:
        """Get cached signer provider."""
        if self._signers is None:
            from base0.core.signer import build_signer_provider

            self._signers = build_signer_provider(self.settings.filecoin)
        return self._signers

    @property
    def content_registry(self) -> ContentRegistry:
        """Get cached content registry."""
        if self._content_registry is None:
            from base0.boundary.chain.factory import get_content_registry

            self._content_registry = get_content_registry(self.settings.filecoin)
        return self._content_registry

    @property
    def canvas_service(self) -> CanvasService:
        """Get cached per-wallet canvas state."""
        if self._canvas_service is None:
            self._canvas_service = CanvasService()
        return self._canvas_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._image_client = None
        self._storage_backends = None
        self._signers = None
        self._content_registry = None
        self._canvas_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_generation_service(cache: ServiceCache = Depends(get_service_cache)) -> GenerationService:
    """
    Get generation service instance.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        GenerationService: Service over the configured provider client
    """
    return GenerationService(client_factory=lambda: cache.image_client)


def get_history_service(db: AsyncSession = Depends(get_async_db)) -> HistoryService:
    """
    Get history service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        HistoryService: History service instance
    """
    return HistoryService(db=db)


def get_balance_service(cache: ServiceCache = Depends(get_service_cache)) -> BalanceService:
    return BalanceService(backends=cache.storage_backends, settings=cache.settings.filecoin)


def get_payment_service(cache: ServiceCache = Depends(get_service_cache)) -> PaymentService:
    return PaymentService(
        backends=cache.storage_backends,
        signers=cache.signers,
        settings=cache.settings.filecoin,
    )


def get_prompt_store(
    cache: ServiceCache = Depends(get_service_cache),
    history: HistoryService = Depends(get_history_service),
) -> FilecoinPromptStore:
    """
    Get Filecoin prompt store bound to the request's history service.

    Args:
        cache: Service cache (injected via Depends)
        history: History service sharing the request's session

    Returns:
        FilecoinPromptStore: Prompt store instance
    """
    return FilecoinPromptStore(
        backends=cache.storage_backends,
        signers=cache.signers,
        history=history,
        settings=cache.settings.filecoin,
    )


def get_content_service(cache: ServiceCache = Depends(get_service_cache)) -> ContentService:
    return ContentService(registry=cache.content_registry)


def get_canvas_service(cache: ServiceCache = Depends(get_service_cache)) -> CanvasService:
    return cache.canvas_service


def get_generation_workflow(
    generation: GenerationService = Depends(get_generation_service),
    history: HistoryService = Depends(get_history_service),
    balances: BalanceService = Depends(get_balance_service),
    prompt_store: FilecoinPromptStore = Depends(get_prompt_store),
    canvases: CanvasService = Depends(get_canvas_service),
) -> GenerationWorkflow:
    """
    Get the canvas generation workflow for one request.

    Returns:
        GenerationWorkflow: Workflow over generation, history and storage services
    """
    return GenerationWorkflow(
        generation=generation,
        history=history,
        balances=balances,
        prompt_store=prompt_store,
        canvases=canvases,
    )
