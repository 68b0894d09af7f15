"""
UGC prompt construction.

Every generation request is wrapped in a user-generated-content photography
brief before it reaches the image provider. Callers that describe a product
or scenario get a brief assembled from those details instead of the fixed one.

Dependencies: base0.models.generation
System role: Prompt enhancement for the image generation client
"""

from base0.models.generation import UGCOptions

UGC_SYSTEM_PROMPT = """Create a UGC lifestyle photography image with the following specifications:

STYLE: UGC lifestyle photography, casual and authentic, smartphone-shot aesthetic, natural lighting

MODELS:
- Female (20-35): genuine smile, approachable, trustworthy, casual everyday wear
- Male (20-35): confident, friendly, relatable, modern casual or streetwear

PRODUCT FOCUS: Natural usage, product held, applied, or integrated in a lifestyle setting. Product should look like part of daily routine, not forced.

BACKGROUND: Realistic everyday settings such as living room, coffee shop, work desk, or outdoors

CAMERA: Eye level or handheld POV, close-up on model and product, natural framing, high resolution but natural, not overly polished

BRANDING: Relatable, positive, authentic tone. Warm, friendly, aspirational mood. Model appears as if recommending product to a friend.

USER REQUEST: """

BASE_IMAGE_PREFIX = (
    "Create a lifestyle avatar holding, using, or interacting with the "
    "product/item shown in the reference image. "
)

AGE_DESCRIPTIONS = {
    "teens": "18-19 year old",
    "young-adult": "20-28 year old",
    "adult": "25-35 year old",
    "mature": "30-45 year old",
}

# (keywords, interaction) checked in order; first match wins
PRODUCT_INTERACTIONS: list[tuple[tuple[str, ...], str]] = [
    (("coffee", "mug", "drink"), "holding and sipping from"),
    (("headphones", "earbuds"), "wearing and enjoying"),
    (("book", "notebook"), "reading or writing in"),
    (("phone", "device", "tech"), "using and interacting with"),
    (("clothing", "shirt", "jacket"), "wearing and showing off"),
    (("food", "snack"), "eating and enjoying"),
    (("supplement", "vitamin"), "taking and showing"),
]

SCENARIO_SETTINGS = {
    "morning routine": "bright bathroom or bedroom with natural morning light",
    "work from home": "clean home office or living room workspace",
    "gym workout": "modern gym or home workout space",
    "coffee break": "cozy cafe or kitchen counter",
    "evening relaxation": "comfortable living room with warm lighting",
}

SETTING_DESCRIPTIONS = {
    "home": "comfortable modern home interior with natural lighting",
    "office": "clean contemporary office space or co-working area",
    "outdoor": "natural outdoor setting, park or urban environment",
    "cafe": "trendy coffee shop or casual restaurant",
    "gym": "modern fitness center or home gym",
}


def get_age_description(age_range: str | None) -> str:
    return AGE_DESCRIPTIONS.get(age_range or "", "25-30 year old")


def get_product_interaction(product_type: str, scenario: str | None = None) -> str:
    """Pick a verb phrase for how the model handles the product."""
    product = product_type.lower()
    if any(word in product for word in ("skincare", "cream", "lotion")):
        return "applying" if scenario == "morning routine" else "holding and demonstrating"
    for keywords, interaction in PRODUCT_INTERACTIONS:
        if any(word in product for word in keywords):
            return interaction
    return "using, holding, or demonstrating"


def get_setting_description(setting: str | None, scenario: str | None = None) -> str:
    """Scenario wins over the generic setting when both are given."""
    if scenario and scenario in SCENARIO_SETTINGS:
        return SCENARIO_SETTINGS[scenario]
    return SETTING_DESCRIPTIONS.get(
        setting or "any",
        "realistic everyday environment with good natural lighting",
    )


def build_ugc_prompt(prompt: str, options: UGCOptions) -> str:
    """
    Assemble a UGC brief from product and scenario details.

    Args:
        prompt: User's own instructions, appended last
        options: Model, age, setting, product and scenario preferences

    Returns:
        str: Complete prompt text
    """
    model_preference = options.model_preference or "any"
    age = get_age_description(options.age_range or "young-adult")

    parts = [
        "UGC lifestyle photography, authentic smartphone aesthetic, natural lighting, "
        "high resolution but candid feel. "
    ]

    if model_preference in ("female", "any"):
        parts.append(
            f"{age} woman with genuine smile, approachable and trustworthy, "
            "wearing casual everyday clothing. "
        )
    else:
        parts.append(
            f"{age} man with confident friendly expression, relatable and modern, "
            "wearing casual or streetwear. "
        )

    if options.product_type:
        product = options.product_type
        parts.append(
            f"Naturally {get_product_interaction(product, options.scenario)} {product}. "
        )
        parts.append(
            f"The {product} should be prominently visible and integrated into the scene "
            "as part of a genuine daily routine. "
        )

    parts.append(f"Setting: {get_setting_description(options.setting, options.scenario)}. ")
    parts.append(
        "Shot from eye level or slight handheld angle, close-up composition focusing on "
        "both the person and product, natural framing. "
    )
    parts.append(
        "Warm, friendly, aspirational mood. The person should appear as if genuinely "
        "recommending or enjoying the product, like sharing with a friend. "
    )
    parts.append(f"Specific request: {prompt}")
    return "".join(parts)


def build_enhanced_prompt(
    prompt: str,
    options: UGCOptions | None = None,
    has_base_image: bool = False,
) -> str:
    """
    Wrap a user prompt in the UGC style brief.

    Args:
        prompt: Prompt as typed by the user
        options: Optional product/scenario details for the dynamic brief
        has_base_image: Whether a reference image accompanies the request

    Returns:
        str: Prompt to send upstream
    """
    if options is None or not options.is_dynamic:
        return UGC_SYSTEM_PROMPT + prompt

    enhanced = build_ugc_prompt(prompt, options)
    if has_base_image and options.product_type:
        enhanced += (
            f" The person should interact with the {options.product_type} in a way that "
            "feels natural and authentic, similar to how someone would demonstrate or "
            "recommend it in a social media post."
        )
    return enhanced


def with_base_image_context(prompt: str) -> str:
    """Prefix used by the canvas when a reference image is connected."""
    return BASE_IMAGE_PREFIX + prompt
