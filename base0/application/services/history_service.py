"""
Prompt and image history service.

Per-wallet history of prompts, generated images and pinned CIDs. Saving is
an upsert by id; reads come back newest first; nothing is ever deleted.

Dependencies: base0.boundary.db.CRUD
System role: History use cases
"""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from base0.boundary.db.base import ensure_utc
from base0.boundary.db.CRUD.image_crud import image_crud
from base0.boundary.db.CRUD.prompt_crud import prompt_crud
from base0.boundary.db.CRUD.wallet_cid_crud import wallet_cid_crud
from base0.boundary.db.models import GeneratedImageModel, UserPromptModel
from base0.boundary.db.storage_keys import storage_key
from base0.core.exceptions import NotFoundError, WalletNotConnectedError
from base0.core.prompt_export import (
    convert_to_prompt_metadata,
    estimate_storage_cost,
    generate_filecoin_filename,
)
from base0.models.prompt import GeneratedImage, HistoryExport, PromptMetadata, UserPrompt

logger = logging.getLogger(__name__)


def _require_address(address: str | None) -> str:
    if not address:
        raise WalletNotConnectedError("Wallet address not found")
    return address


def prompt_from_model(model: UserPromptModel) -> UserPrompt:
    return UserPrompt(
        id=model.id,
        user_id=model.user_id,
        prompt=model.prompt,
        enhanced_prompt=model.enhanced_prompt,
        base_image_url=model.base_image_url,
        timestamp=ensure_utc(model.timestamp),
        cid=model.cid,
        filecoin_url=model.filecoin_url,
        metadata=PromptMetadata.model_validate(model.prompt_metadata or {}),
    )


def image_from_model(model: GeneratedImageModel) -> GeneratedImage:
    return GeneratedImage(
        id=model.id,
        user_id=model.user_id,
        prompt_id=model.prompt_id,
        image_url=model.image_url,
        share_url=model.share_url,
        deepai_id=model.deepai_id,
        timestamp=ensure_utc(model.timestamp),
        metadata=model.image_metadata or {},
    )


class HistoryService:
    """History service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize history service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def save_prompt(self, prompt: UserPrompt) -> UserPrompt:
        """
        Insert or overwrite a prompt by id.

        Args:
            prompt: Prompt record; user_id is the owning wallet

        Returns:
            UserPrompt: The stored record

        Raises:
            WalletNotConnectedError: If the prompt has no wallet address
        """
        _require_address(prompt.user_id)
        model = await prompt_crud.upsert(
            self.db,
            prompt.id,
            user_id=prompt.user_id,
            prompt=prompt.prompt,
            enhanced_prompt=prompt.enhanced_prompt,
            base_image_url=prompt.base_image_url,
            timestamp=prompt.timestamp,
            cid=prompt.cid,
            filecoin_url=prompt.filecoin_url,
            prompt_metadata=prompt.metadata.model_dump(),
        )
        logger.info(f"{__name__}:save_prompt - Saved prompt {prompt.id} (cid={prompt.cid})")
        return prompt_from_model(model)

    async def save_generated_image(self, image: GeneratedImage) -> GeneratedImage:
        """Insert or overwrite an image by id."""
        _require_address(image.user_id)
        model = await image_crud.upsert(
            self.db,
            image.id,
            user_id=image.user_id,
            prompt_id=image.prompt_id,
            image_url=image.image_url,
            share_url=image.share_url,
            deepai_id=image.deepai_id,
            timestamp=image.timestamp,
            image_metadata=image.metadata,
        )
        logger.info(f"{__name__}:save_generated_image - Saved image {image.id} for prompt {image.prompt_id}")
        return image_from_model(model)

    async def get_user_prompts(self, address: str | None) -> list[UserPrompt]:
        models = await prompt_crud.get_by_user(self.db, _require_address(address))
        return [prompt_from_model(m) for m in models]

    async def get_user_images(self, address: str | None) -> list[GeneratedImage]:
        models = await image_crud.get_by_user(self.db, _require_address(address))
        return [image_from_model(m) for m in models]

    async def get_prompt_by_id(self, address: str | None, prompt_id: str) -> UserPrompt | None:
        address = _require_address(address)
        model = await prompt_crud.get_by_id(self.db, prompt_id)
        if model is None or model.user_id != address:
            return None
        return prompt_from_model(model)

    async def get_images_by_prompt_id(self, address: str | None, prompt_id: str) -> list[GeneratedImage]:
        models = await image_crud.get_by_prompt_id(self.db, _require_address(address), prompt_id)
        return [image_from_model(m) for m in models]

    async def append_wallet_cid(self, address: str | None, cid: str) -> list[str]:
        """Append a CID to the wallet's index and return the whole index."""
        address = _require_address(address)
        await wallet_cid_crud.append(self.db, address, cid)
        return await wallet_cid_crud.list_cids(self.db, address)

    async def get_wallet_cids(self, address: str | None) -> list[str]:
        return await wallet_cid_crud.list_cids(self.db, _require_address(address))

    async def get_storage_stats(self, address: str | None) -> dict:
        """Record counts and the serialized history size in KB."""
        prompts = await self.get_user_prompts(address)
        images = await self.get_user_images(address)
        size = len(_dump(prompts)) + len(_dump(images))
        return {
            "promptCount": len(prompts),
            "imageCount": len(images),
            "totalSize": size / 1024,
        }

    async def get_prompt_document(self, address: str | None, prompt_id: str) -> dict:
        """
        Export one prompt and its images as a shareable JSON document.

        Returns:
            dict: filename, document and a rough long-term storage estimate

        Raises:
            NotFoundError: Prompt does not exist for this wallet
        """
        prompt = await self.get_prompt_by_id(address, prompt_id)
        if prompt is None:
            raise NotFoundError(f"Prompt {prompt_id} not found")
        images = await self.get_images_by_prompt_id(address, prompt_id)
        document = convert_to_prompt_metadata(prompt, images)
        return {
            "filename": generate_filecoin_filename(prompt),
            "document": document.model_dump(mode="json", by_alias=True),
            "estimate": estimate_storage_cost(len(document.model_dump_json(by_alias=True))),
        }

    async def export_history(self, address: str | None) -> HistoryExport:
        """Everything kept for a wallet, under its legacy local-storage keys."""
        address = _require_address(address)
        prompts = await self.get_user_prompts(address)
        images = await self.get_user_images(address)
        cids = await self.get_wallet_cids(address)
        return HistoryExport(
            address=address,
            entries={
                storage_key("prompts", address): [p.model_dump(mode="json", by_alias=True) for p in prompts],
                storage_key("images", address): [i.model_dump(mode="json", by_alias=True) for i in images],
                storage_key("cids", address): cids,
            },
        )


def _dump(records: list) -> str:
    return json.dumps([r.model_dump(mode="json", by_alias=True) for r in records])
