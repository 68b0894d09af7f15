"""
Image generation request/response models.

Keys mix camelCase and snake_case because the upstream contract does
(`walletAddress` next to `image_generator_version`); each field declares
its wire alias explicitly.

Dependencies: pydantic
System role: API contracts for /api/generate-image
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ImageGeneratorVersion = Literal["standard", "hd", "genius"]
GeniusPreference = Literal["anime", "photography", "graphic", "cinematic"]
ModelPreference = Literal["female", "male", "any"]
AgeRange = Literal["teens", "young-adult", "adult", "mature"]
SettingPreference = Literal["home", "office", "outdoor", "cafe", "gym", "any"]


class UGCOptions(BaseModel):
    """Optional knobs for the dynamic UGC prompt builder."""

    model_config = ConfigDict(populate_by_name=True)

    model_preference: ModelPreference | None = Field(default=None, alias="modelPreference")
    age_range: AgeRange | None = Field(default=None, alias="ageRange")
    setting: SettingPreference | None = None
    product_type: str | None = Field(default=None, alias="productType")
    scenario: str | None = None

    @property
    def is_dynamic(self) -> bool:
        """Dynamic builder kicks in once a product or scenario is described."""
        return bool(self.product_type or self.scenario)


class GenerateImageRequest(BaseModel):
    """Request to generate one image from a text prompt.

    ``prompt`` is optional at the schema level so that a missing prompt
    surfaces as the "Prompt is required" error rather than a generic
    request validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str | None = Field(default=None, description="Free-text user prompt")
    wallet_address: str | None = Field(default=None, alias="walletAddress")
    width: int = Field(default=512, gt=0, le=2048)
    height: int = Field(default=512, gt=0, le=2048)
    image_generator_version: ImageGeneratorVersion = "standard"
    genius_preference: GeniusPreference = "photography"
    negative_prompt: str | None = None
    base_object: str | None = Field(
        default=None,
        alias="baseObject",
        description="Base image for image-to-image: data URI or http(s) URL",
    )

    model_preference: ModelPreference | None = Field(default=None, alias="modelPreference")
    age_range: AgeRange | None = Field(default=None, alias="ageRange")
    setting: SettingPreference | None = None
    product_type: str | None = Field(default=None, alias="productType")
    scenario: str | None = None

    @property
    def ugc_options(self) -> UGCOptions:
        return UGCOptions(
            model_preference=self.model_preference,
            age_range=self.age_range,
            setting=self.setting,
            product_type=self.product_type,
            scenario=self.scenario,
        )


class GenerationMetadata(BaseModel):
    """Metadata echoed back alongside a generated image."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(description="Enhanced prompt actually sent upstream")
    original_prompt: str = Field(alias="originalPrompt")
    wallet_address: str | None = Field(default=None, alias="walletAddress")
    generated_at: str = Field(alias="generatedAt")
    width: int
    height: int
    version: ImageGeneratorVersion
    preference: GeniusPreference | None = None
    has_base_image: bool = Field(default=False, alias="hasBaseImage")
    product_type: str | None = Field(default=None, alias="productType")
    scenario: str | None = None


class GeneratedImageResult(BaseModel):
    """Provider-neutral result of a single generation call."""

    image_url: str
    id: str
    share_url: str | None = None
    backend_request_id: str | None = None
    nsfw_score: float | None = None


class GenerateImageResponse(BaseModel):
    """Successful generation response."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    image_url: str = Field(alias="imageUrl")
    share_url: str | None = Field(default=None, alias="shareUrl")
    id: str
    backend_request_id: str | None = Field(default=None, alias="backendRequestId")
    nsfw_score: float | None = None
    metadata: GenerationMetadata
