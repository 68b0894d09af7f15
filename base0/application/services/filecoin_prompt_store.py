"""
Pins prompt documents and user files to Filecoin.

A prompt is serialized as pretty-printed JSON, run through the storage
pipeline, and its piece CID appended to the wallet's CID index. Arbitrary
files take the same path.

Dependencies: base0.core.storage_pipeline, base0.core.signer
System role: Filecoin persistence of prompt history
"""

import json
import logging

from tenacity.wait import wait_base

from base0.application.services.history_service import HistoryService
from base0.boundary.storage.factory import StorageBackendFactory
from base0.configs.filecoin import MIB, FilecoinSettings
from base0.core.exceptions import StorageError, ValidationError
from base0.core.signer import SignerProvider, wait_for_signer
from base0.core.storage_pipeline import StoragePipeline
from base0.models.prompt import UserPrompt
from base0.models.storage import StoredPromptResult, UploadedFileResult, UploadResult

logger = logging.getLogger(__name__)


def encode_prompt(prompt: UserPrompt) -> bytes:
    return json.dumps(prompt.model_dump(mode="json", by_alias=True), indent=2).encode("utf-8")


class FilecoinPromptStore:
    """Stores and retrieves prompt documents for one storage configuration."""

    def __init__(
        self,
        backends: StorageBackendFactory,
        signers: SignerProvider,
        history: HistoryService,
        settings: FilecoinSettings,
        signer_wait: wait_base | None = None,
    ) -> None:
        self.backends = backends
        self.signers = signers
        self.history = history
        self.settings = settings
        self.signer_wait = signer_wait

    def download_url(self, cid: str) -> str:
        return f"{self.settings.piece_download_base_url.rstrip('/')}/{cid}"

    async def _signer(self, address: str | None) -> None:
        await wait_for_signer(
            self.signers,
            address,
            retries=self.settings.signer_retry_attempts,
            delay_seconds=self.settings.signer_retry_delay_seconds,
            wait=self.signer_wait,
        )

    async def store_prompt(self, prompt: UserPrompt) -> StoredPromptResult:
        """
        Upload a prompt document and index its CID under the wallet.

        Args:
            prompt: Prompt to pin; user_id is the paying wallet

        Returns:
            StoredPromptResult: CID, download URL and pipeline statuses

        Raises:
            WalletNotConnectedError: Prompt has no wallet address
            SignerTimingError: Signer never became available
            PaymentError: Payment failed; nothing uploaded or indexed
            StorageError: Upload failed for another reason
        """
        await self._signer(prompt.user_id)
        data = encode_prompt(prompt)
        logger.info(f"{__name__}:store_prompt - START prompt={prompt.id} bytes={len(data)}")

        result, pipeline = await self._pin(prompt.user_id, data)
        logger.info(f"{__name__}:store_prompt - END prompt={prompt.id} cid={result.piece_cid}")
        return StoredPromptResult(
            cid=result.piece_cid,
            download_url=self.download_url(result.piece_cid),
            statuses=pipeline.history,
        )

    async def store_file(self, address: str | None, file_name: str, data: bytes) -> UploadedFileResult:
        """
        Upload an arbitrary file and index its CID under the wallet.

        Args:
            address: Paying wallet
            file_name: Name reported back to the caller
            data: File content

        Returns:
            UploadedFileResult: File name and size, piece CID, download URL and statuses

        Raises:
            ValidationError: Empty or oversized file
            SignerTimingError: Signer never became available
            PaymentError: Payment failed; nothing uploaded or indexed
            StorageError: Upload failed for another reason
        """
        if not data:
            raise ValidationError("File is empty", field="file")
        if len(data) > self.settings.max_upload_size_bytes:
            raise ValidationError(
                f"File too large. Maximum size: {self.settings.max_upload_size_bytes // MIB}MB",
                field="file",
            )

        await self._signer(address)
        logger.info(f"{__name__}:store_file - START file={file_name!r} bytes={len(data)}")
        result, pipeline = await self._pin(address, data)
        logger.info(f"{__name__}:store_file - END file={file_name!r} cid={result.piece_cid}")

        tx_hashes = [status.tx_hash for status in pipeline.history if status.tx_hash]
        return UploadedFileResult(
            file_name=file_name,
            file_size=len(data),
            piece_cid=result.piece_cid,
            tx_hash=tx_hashes[-1] if tx_hashes else None,
            download_url=self.download_url(result.piece_cid),
            statuses=pipeline.history,
        )

    async def _pin(self, address: str, data: bytes) -> tuple[UploadResult, StoragePipeline]:
        """Run `data` through a fresh pipeline and append the CID to the wallet index."""
        pipeline = StoragePipeline(
            self.backends.for_wallet(address),
            persistence_days=self.settings.persistence_period_days,
        )
        result = await pipeline.run(data)
        cids = await self.history.append_wallet_cid(address, result.piece_cid)
        logger.debug(f"{__name__}:_pin - {address} now has {len(cids)} CIDs")
        return result, pipeline

    async def retrieve_prompt(self, address: str | None, cid: str) -> UserPrompt:
        """
        Download and decode a pinned prompt document.

        Raises:
            NotFoundError: Unknown CID
            StorageError: Data is not a prompt document
        """
        await self._signer(address)
        data = await self.backends.for_wallet(address).download(cid)
        try:
            return UserPrompt.model_validate(json.loads(data.decode("utf-8")))
        except (UnicodeDecodeError, ValueError) as e:
            raise StorageError(f"Data stored under {cid} is not a prompt document") from e
