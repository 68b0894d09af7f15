"""Service orchestrators."""

from .balance_service import BalanceService
from .canvas_service import CanvasService
from .content_service import ContentService
from .filecoin_prompt_store import FilecoinPromptStore
from .generation_service import GenerationService
from .generation_workflow import GenerationWorkflow
from .history_service import HistoryService
from .payment_service import PaymentService

__all__ = [
    "BalanceService",
    "CanvasService",
    "ContentService",
    "FilecoinPromptStore",
    "GenerationService",
    "GenerationWorkflow",
    "HistoryService",
    "PaymentService",
]
