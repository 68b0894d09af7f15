"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_balance_service,
    get_canvas_service,
    get_content_service,
    get_generation_service,
    get_generation_workflow,
    get_history_service,
    get_payment_service,
    get_prompt_store,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_balance_service",
    "get_canvas_service",
    "get_content_service",
    "get_generation_service",
    "get_generation_workflow",
    "get_history_service",
    "get_payment_service",
    "get_prompt_store",
    "get_service_cache",
]
