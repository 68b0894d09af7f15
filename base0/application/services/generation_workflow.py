"""
Canvas generation workflow.

The playground flow for one imageGenerator node:

1. Resolve the base image wired into the node and prefix the prompt with
   the reference-image instruction when there is one.
2. Generate, then push the result onto the node and its downstream nodes.
3. Build the prompt and image history records.
4. Check the wallet's paid storage. Without enough paid time the prompt is
   saved locally only. Otherwise it is pinned to Filecoin.
5. A payment failure while pinning keeps the prompt out of history. Any
   other failure falls back to saving it locally.
6. The image record is always saved locally.

Dependencies: base0.application.services
System role: Use case behind POST /api/canvas/{address}/nodes/{node_id}/generate
"""

import logging
import secrets
import string
import time
from datetime import datetime, timezone

from base0.application.services.balance_service import BalanceService
from base0.application.services.canvas_service import CanvasService
from base0.application.services.filecoin_prompt_store import FilecoinPromptStore
from base0.application.services.generation_service import GenerationService
from base0.application.services.history_service import HistoryService
from base0.core.exceptions import (
    Base0Exception,
    PaymentError,
    SignerTimingError,
    ValidationError,
    WalletNotConnectedError,
)
from base0.core.prompt_builder import with_base_image_context
from base0.models.canvas import GenerateOnNodeRequest, StorageOutcome, WorkflowResult
from base0.models.generation import GenerateImageRequest
from base0.models.prompt import GeneratedImage, PromptMetadata, UserPrompt
from base0.models.storage import StoredPromptResult

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits

PAYMENT_REQUIRED_MESSAGE = (
    "Payment required. Pay for Filecoin storage before storing prompts. "
    "Your prompt was saved locally."
)
PAYMENT_FAILED_MESSAGE = (
    "Payment required. Storage payment failed, so the prompt was not stored. "
    "Pay for storage and try again."
)
SIGNER_FALLBACK_MESSAGE = (
    "Your image was generated successfully, but the wallet signer was not ready. "
    "Your prompt was saved locally."
)
FALLBACK_MESSAGE = "Filecoin storage failed. Your prompt was saved locally."


def new_record_id(prefix: str) -> str:
    """e.g. prompt_1718000000000_k3j9x0a1b"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


class GenerationWorkflow:
    """Playground generation over the canvas, history and storage services."""

    def __init__(
        self,
        generation: GenerationService,
        history: HistoryService,
        balances: BalanceService,
        prompt_store: FilecoinPromptStore,
        canvases: CanvasService,
    ) -> None:
        self.generation = generation
        self.history = history
        self.balances = balances
        self.prompt_store = prompt_store
        self.canvases = canvases

    async def generate_on_node(
        self,
        address: str | None,
        node_id: str,
        request: GenerateOnNodeRequest,
    ) -> WorkflowResult:
        """
        Generate an image for a canvas node and persist its history.

        Args:
            address: Connected wallet
            node_id: imageGenerator node to run
            request: Generation parameters; prompt falls back to the node's own

        Returns:
            WorkflowResult: Records plus how the prompt was persisted

        Raises:
            WalletNotConnectedError: No wallet address
            ValidationError: Unknown node type or missing prompt
            Base0Exception: Generation failure (also recorded on the node)
        """
        if not address:
            raise WalletNotConnectedError()

        graph = self.canvases.get(address)
        node = graph.node(node_id)
        if node.type != "imageGenerator":
            raise ValidationError(f"Node {node_id} is not an imageGenerator node", field="nodeId")

        prompt = (request.prompt or node.data.get("prompt") or "").strip()
        if not prompt:
            raise ValidationError("Prompt is required", field="prompt")

        base_image_url = graph.resolve_base_image(node_id) or request.base_image_url
        prompt_text = with_base_image_context(prompt) if base_image_url else prompt

        graph.mark_generating(node_id)
        try:
            response = await self.generation.generate(
                GenerateImageRequest(
                    prompt=prompt_text,
                    wallet_address=address,
                    width=request.width,
                    height=request.height,
                    image_generator_version=request.image_generator_version,
                    genius_preference=request.genius_preference,
                    negative_prompt=request.negative_prompt,
                    base_object=base_image_url,
                    product_type=request.product_type,
                    scenario=request.scenario,
                )
            )
        except Base0Exception as e:
            graph.apply_error(node_id, e.message)
            raise

        graph.apply_result(node_id, response.model_dump(mode="json", by_alias=True), prompt=prompt_text)

        now = datetime.now(timezone.utc)
        user_prompt = UserPrompt(
            id=new_record_id("prompt"),
            user_id=address,
            prompt=prompt,
            enhanced_prompt=response.metadata.prompt,
            base_image_url=base_image_url,
            timestamp=now,
            metadata=PromptMetadata(
                width=request.width,
                height=request.height,
                version=request.image_generator_version,
                preference=request.genius_preference,
            ),
        )
        image = GeneratedImage(
            id=new_record_id("img"),
            user_id=address,
            prompt_id=user_prompt.id,
            image_url=response.image_url,
            share_url=response.share_url,
            deepai_id=response.id,
            timestamp=now,
            metadata={
                **response.metadata.model_dump(mode="json", by_alias=True),
                **request.model_dump(mode="json", exclude={"prompt", "base_image_url"}),
                "baseImageUrl": base_image_url,
                "nodeId": node_id,
            },
        )

        outcome, message, saved_prompt, stored = await self._persist_prompt(address, user_prompt)
        saved_image = await self.history.save_generated_image(image)

        node_update = {"savedImageId": saved_image.id}
        if saved_prompt is not None:
            node_update["savedPromptId"] = saved_prompt.id
        node.data = {**node.data, **node_update}

        logger.info(f"{__name__}:generate_on_node - END node={node_id} outcome={outcome}")
        return WorkflowResult(
            storage_outcome=outcome,
            message=message,
            image_url=saved_image.image_url,
            prompt=saved_prompt or user_prompt,
            prompt_saved=saved_prompt is not None,
            image=saved_image,
            storage=stored,
        )

    async def _persist_prompt(
        self,
        address: str,
        prompt: UserPrompt,
    ) -> tuple[StorageOutcome, str, UserPrompt | None, StoredPromptResult | None]:
        """Returns (outcome, message, saved prompt or None, Filecoin result or None)."""
        try:
            usage = await self.balances.get_storage_usage(address)
        except Base0Exception as e:
            logger.warning(f"{__name__}:_persist_prompt - Storage usage unavailable: {e}")
            return "local_fallback", FALLBACK_MESSAGE, await self.history.save_prompt(prompt), None

        if usage.needs_repayment:
            logger.info(f"{__name__}:_persist_prompt - {address} needs to pay for storage")
            return "payment_required", PAYMENT_REQUIRED_MESSAGE, await self.history.save_prompt(prompt), None

        try:
            stored = await self.prompt_store.store_prompt(prompt)
        except PaymentError as e:
            logger.warning(f"{__name__}:_persist_prompt - Payment failed, prompt not stored: {e}")
            return "payment_failed", PAYMENT_FAILED_MESSAGE, None, None
        except Base0Exception as e:
            logger.warning(f"{__name__}:_persist_prompt - Falling back to local history: {e}")
            message = SIGNER_FALLBACK_MESSAGE if isinstance(e, SignerTimingError) else FALLBACK_MESSAGE
            return "local_fallback", message, await self.history.save_prompt(prompt), None

        pinned = prompt.model_copy(update={"cid": stored.cid, "filecoin_url": stored.download_url})
        saved = await self.history.save_prompt(pinned)
        return "stored", f"Prompt stored on Filecoin with CID {stored.cid}", saved, stored
