"""
Test suite for UGC prompt construction.

System role: Verification of prompt enhancement
"""

from base0.core.prompt_builder import (
    BASE_IMAGE_PREFIX,
    UGC_SYSTEM_PROMPT,
    build_enhanced_prompt,
    get_product_interaction,
    get_setting_description,
    with_base_image_context,
)
from base0.models.generation import UGCOptions


class TestBuildEnhancedPrompt:
    def test_fixed_brief_without_options(self) -> None:
        assert build_enhanced_prompt("a red bicycle") == UGC_SYSTEM_PROMPT + "a red bicycle"

    def test_fixed_brief_when_options_are_not_dynamic(self) -> None:
        options = UGCOptions(model_preference="male", setting="gym")

        assert build_enhanced_prompt("x", options) == UGC_SYSTEM_PROMPT + "x"

    def test_dynamic_brief_for_product(self) -> None:
        """Test a described product switches to the assembled brief."""
        # Arrange
        options = UGCOptions(product_type="coffee mug", model_preference="male", age_range="mature")

        # Act
        prompt = build_enhanced_prompt("on a desk", options)

        # Assert
        assert not prompt.startswith(UGC_SYSTEM_PROMPT)
        assert "30-45 year old man" in prompt
        assert "Naturally holding and sipping from coffee mug." in prompt
        assert prompt.endswith("Specific request: on a desk")

    def test_base_image_adds_interaction_sentence(self) -> None:
        options = UGCOptions(product_type="headphones")

        prompt = build_enhanced_prompt("studio", options, has_base_image=True)

        assert prompt.endswith(
            "The person should interact with the headphones in a way that feels natural and "
            "authentic, similar to how someone would demonstrate or recommend it in a social media post."
        )

    def test_scenario_only_uses_default_woman(self) -> None:
        prompt = build_enhanced_prompt("smiling", UGCOptions(scenario="coffee break"))

        assert "20-28 year old woman" in prompt
        assert "Setting: cozy cafe or kitchen counter." in prompt
        assert "Naturally" not in prompt


class TestHelpers:
    def test_skincare_depends_on_scenario(self) -> None:
        assert get_product_interaction("Face Cream", "morning routine") == "applying"
        assert get_product_interaction("Face Cream") == "holding and demonstrating"

    def test_first_keyword_match_wins(self) -> None:
        assert get_product_interaction("tech notebook") == "reading or writing in"

    def test_unknown_product(self) -> None:
        assert get_product_interaction("bicycle") == "using, holding, or demonstrating"

    def test_scenario_beats_setting(self) -> None:
        assert get_setting_description("office", "gym workout") == "modern gym or home workout space"
        assert get_setting_description("office") == "clean contemporary office space or co-working area"
        assert get_setting_description(None) == "realistic everyday environment with good natural lighting"

    def test_base_image_context(self) -> None:
        assert with_base_image_context("on a beach") == BASE_IMAGE_PREFIX + "on a beach"
