import pytest
from pydantic import ValidationError

from text2image.catalog import DEFAULT_MODEL_ID, AspectRatio, StylePreset
from text2image.models import GeneratedImage, GenerationSettings, HistoryItem


def test_settings_defaults():
    s = GenerationSettings(prompt="a fox")
    assert s.negative_prompt == ""
    assert s.aspect_ratio is AspectRatio.SQUARE
    assert s.style_preset is StylePreset.NONE
    assert s.model_id == DEFAULT_MODEL_ID
    assert s.steps == 30
    assert s.guidance_scale == 7.0
    assert s.seed is None


@pytest.mark.parametrize("field, value", [("steps", 9), ("steps", 51), ("guidance_scale", 0.5), ("guidance_scale", 21)])
def test_settings_ranges(field, value):
    with pytest.raises(ValidationError):
        GenerationSettings(prompt="a fox", **{field: value})


def test_settings_reject_unknown_aspect_ratio():
    with pytest.raises(ValidationError):
        GenerationSettings(prompt="a fox", aspect_ratio="2:1")


def test_settings_are_frozen():
    s = GenerationSettings(prompt="a fox")
    with pytest.raises(ValidationError):
        s.prompt = "a wolf"


def test_settings_accept_camel_case():
    s = GenerationSettings.model_validate(
        {
            "prompt": "a fox",
            "negativePrompt": "blur",
            "aspectRatio": "16:9",
            "stylePreset": "Digital Art",
            "modelId": "imagen-3.0-generate-001",
            "guidanceScale": 13,
        }
    )
    assert s.negative_prompt == "blur"
    assert s.aspect_ratio is AspectRatio.LANDSCAPE
    assert s.style_preset is StylePreset.DIGITAL_ART
    assert s.model_id == "imagen-3.0-generate-001"
    assert s.guidance_scale == 13


def test_generated_image_requires_payload():
    with pytest.raises(ValidationError):
        GeneratedImage(
            id="abc",
            base64_data="",
            settings=GenerationSettings(prompt="a fox"),
            timestamp=1,
            model=DEFAULT_MODEL_ID,
        )


def test_history_item_from_image_and_json_keys():
    image = GeneratedImage(
        id="1234567890",
        base64_data="aGVsbG8=",
        settings=GenerationSettings(prompt="a fox"),
        timestamp=1700000000000,
        model=DEFAULT_MODEL_ID,
    )
    item = HistoryItem.from_image(image)
    assert item.is_favorite is False
    assert item.settings == image.settings

    dumped = item.model_dump(mode="json", by_alias=True)
    assert dumped["base64Data"] == "aGVsbG8="
    assert dumped["isFavorite"] is False
    assert dumped["settings"]["negativePrompt"] == ""
    assert dumped["settings"]["aspectRatio"] == "1:1"
