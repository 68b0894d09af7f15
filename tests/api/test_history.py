"""
Test suite for the /api/history endpoints with a mocked history service.
"""

import json
from datetime import datetime, timezone

from base0.core.exceptions import NotFoundError, WalletNotConnectedError
from base0.models.prompt import GeneratedImage, HistoryExport, UserPrompt

WALLET = "0x1111111111111111111111111111111111111111"
NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def make_prompt(prompt_id: str = "p1") -> UserPrompt:
    return UserPrompt(
        id=prompt_id,
        user_id=WALLET,
        prompt="a red bicycle",
        enhanced_prompt="a red bicycle, studio light",
        timestamp=NOW,
        cid="bafkprompt",
    )


def make_image() -> GeneratedImage:
    return GeneratedImage(
        id="img1",
        user_id=WALLET,
        prompt_id="p1",
        image_url="https://images.example/1.png",
        deepai_id="deepai-1",
        timestamp=NOW,
    )


class TestHistoryRoutes:
    """Read-only history endpoints."""

    def test_list_prompts_uses_camel_case(self, client, mock_history_service):
        # Arrange
        mock_history_service.get_user_prompts.return_value = [make_prompt()]

        # Act
        response = client.get(f"/api/history/{WALLET}/prompts")

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body[0]["enhancedPrompt"] == "a red bicycle, studio light"
        assert body[0]["userId"] == WALLET
        mock_history_service.get_user_prompts.assert_awaited_once_with(WALLET)

    def test_get_prompt(self, client, mock_history_service):
        mock_history_service.get_prompt_by_id.return_value = make_prompt()

        response = client.get(f"/api/history/{WALLET}/prompts/p1")

        assert response.status_code == 200
        assert response.json()["cid"] == "bafkprompt"

    def test_get_missing_prompt_is_404(self, client, mock_history_service):
        mock_history_service.get_prompt_by_id.return_value = None

        response = client.get(f"/api/history/{WALLET}/prompts/nope")

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_images_of_prompt(self, client, mock_history_service):
        mock_history_service.get_images_by_prompt_id.return_value = [make_image()]

        response = client.get(f"/api/history/{WALLET}/prompts/p1/images")

        assert response.status_code == 200
        assert response.json()[0]["promptId"] == "p1"
        mock_history_service.get_images_by_prompt_id.assert_awaited_once_with(WALLET, "p1")

    def test_list_images(self, client, mock_history_service):
        mock_history_service.get_user_images.return_value = [make_image()]

        response = client.get(f"/api/history/{WALLET}/images")

        assert response.json()[0]["deepaiId"] == "deepai-1"

    def test_stats(self, client, mock_history_service):
        mock_history_service.get_storage_stats.return_value = {
            "promptCount": 1,
            "imageCount": 2,
            "totalSize": 0.5,
        }

        response = client.get(f"/api/history/{WALLET}/stats")

        assert response.json() == {"promptCount": 1, "imageCount": 2, "totalSize": 0.5}

    def test_export(self, client, mock_history_service):
        mock_history_service.export_history.return_value = HistoryExport(
            address=WALLET,
            entries={f"base0_cids_{WALLET}": ["bafkprompt"]},
        )

        response = client.get(f"/api/history/{WALLET}/export")

        assert response.status_code == 200
        assert response.json()["entries"][f"base0_cids_{WALLET}"] == ["bafkprompt"]

    def test_document_not_found(self, client, mock_history_service):
        mock_history_service.get_prompt_document.side_effect = NotFoundError("Prompt p9 not found")

        response = client.get(f"/api/history/{WALLET}/prompts/p9/document")

        assert response.status_code == 404
        assert response.json()["error"] == "Prompt p9 not found"

    def test_wallet_error_is_401(self, client, mock_history_service):
        mock_history_service.get_user_images.side_effect = WalletNotConnectedError("Wallet address not found")

        response = client.get(f"/api/history/{WALLET}/images")

        assert response.status_code == 401
        assert response.json()["kind"] == "wallet"


class TestValidateDocument:
    """POST /api/history/documents/validate"""

    def test_valid_document(self, client):
        document = {
            "version": "1.0",
            "generatedAt": "2024-05-01T09:30:00.000Z",
            "model": "deepai-standard",
            "parameters": {"prompt": "a red bicycle"},
            "images": [{"id": "img1", "filename": "img1.png", "width": 512, "height": 512}],
        }

        response = client.post("/api/history/documents/validate", json={"content": json.dumps(document)})

        body = response.json()
        assert body["valid"] is True
        assert body["error"] is None
        assert body["document"]["parameters"]["prompt"] == "a red bicycle"

    def test_invalid_json(self, client):
        response = client.post("/api/history/documents/validate", json={"content": "{nope"})

        assert response.json() == {"valid": False, "error": "Invalid JSON format", "document": None}
