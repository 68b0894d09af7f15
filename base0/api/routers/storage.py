"""
Filecoin storage API endpoints.

Routes:
- GET /storage/costs - Quota price and deposit for a wallet
- GET /storage/network - Configured Filecoin network
- GET /storage/prompts/{cid} - Download a pinned prompt
- POST /storage/{address}/pay - Deposit and approve the paid quota
- POST /storage/{address}/upload - Pin an uploaded file
- GET /storage/{address}/usage - Paid time remaining
- GET /storage/{address}/cids - Pinned CIDs in insertion order

Dependencies: base0.application.services, base0.models
System role: Storage payment HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile

from base0.api.deps.dependencies import (
    get_balance_service,
    get_history_service,
    get_payment_service,
    get_prompt_store,
)
from base0.application.services.balance_service import BalanceService
from base0.application.services.filecoin_prompt_store import FilecoinPromptStore
from base0.application.services.history_service import HistoryService
from base0.application.services.payment_service import PaymentService
from base0.models.prompt import UserPrompt
from base0.models.storage import (
    NetworkInfo,
    StoragePaymentPlan,
    StoragePaymentResult,
    StorageUsage,
    UploadedFileResult,
)

from .error_handling import handle_api_errors

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storage", tags=["storage"])


@router.get("/costs", response_model=StoragePaymentPlan)
@handle_api_errors
async def get_storage_costs(
    address: str = Query(..., description="Wallet the quota would be paid from"),
    payment_service: PaymentService = Depends(get_payment_service),
) -> StoragePaymentPlan:
    return await payment_service.get_storage_costs(address)


@router.get("/network", response_model=NetworkInfo)
@handle_api_errors
async def get_network(balance_service: BalanceService = Depends(get_balance_service)) -> NetworkInfo:
    return balance_service.get_network_config()


@router.get("/prompts/{cid}", response_model=UserPrompt)
@handle_api_errors
async def retrieve_prompt(
    cid: str,
    address: str = Query(..., description="Wallet whose signer reads the piece"),
    prompt_store: FilecoinPromptStore = Depends(get_prompt_store),
) -> UserPrompt:
    return await prompt_store.retrieve_prompt(address, cid)


@router.post("/{address}/pay", response_model=StoragePaymentResult)
@handle_api_errors
async def pay_for_storage(
    address: str,
    payment_service: PaymentService = Depends(get_payment_service),
) -> StoragePaymentResult:
    """
    Pay for the standard storage quota.

    Args:
        address: Paying wallet
        payment_service: Injected PaymentService

    Returns:
        StoragePaymentResult: Deposit, approval tx hash and status log

    Raises:
        HTTPException(401): No wallet address
        HTTPException(402): Deposit or approval reverted
        HTTPException(409): Wallet signer not ready
    """
    logger.info(f"{__name__}:pay_for_storage - Payment requested by {address}")
    return await payment_service.pay_for_storage(address)


@router.post("/{address}/upload", response_model=UploadedFileResult)
@handle_api_errors
async def upload_file(
    address: str,
    file: UploadFile = File(...),
    prompt_store: FilecoinPromptStore = Depends(get_prompt_store),
) -> UploadedFileResult:
    """
    Pin a file to Filecoin, paying for storage first if the allowance is short.

    Args:
        address: Paying wallet
        file: Uploaded file (multipart form)
        prompt_store: Injected FilecoinPromptStore

    Returns:
        UploadedFileResult: fileName, fileSize, pieceCid, txHash, downloadUrl and statuses

    Raises:
        HTTPException(400): Empty or oversized file
        HTTPException(402): Payment failed, nothing stored
        HTTPException(409): Wallet signer not ready
    """
    logger.info(f"{__name__}:upload_file - {address} uploading {file.filename!r}")
    content = await file.read()
    return await prompt_store.store_file(address, file.filename or "upload", content)


@router.get("/{address}/usage", response_model=StorageUsage)
@handle_api_errors
async def get_storage_usage(
    address: str,
    current_usage_bytes: int = Query(default=0, ge=0, alias="currentUsageBytes"),
    balance_service: BalanceService = Depends(get_balance_service),
) -> StorageUsage:
    return await balance_service.get_storage_usage(address, current_usage_bytes)


@router.get("/{address}/cids")
@handle_api_errors
async def get_wallet_cids(
    address: str,
    history_service: HistoryService = Depends(get_history_service),
) -> dict:
    cids = await history_service.get_wallet_cids(address)
    return {"address": address, "cids": cids}
