import random

import pytest

from text2image.catalog import (
    DEFAULT_MODEL_ID,
    MODELS,
    SAMPLE_PROMPTS,
    STYLE_PROMPTS,
    ModelFamily,
    StylePreset,
    get_model,
    random_sample_prompt,
    resolve_family,
)


@pytest.mark.parametrize(
    "model_id, family",
    [
        ("gemini-2.5-flash-image", ModelFamily.FLASH),
        ("gemini-3-pro-image-preview", ModelFamily.PRO),
        ("imagen-3.0-generate-001", ModelFamily.IMAGEN),
        ("imagen-4.0-generate-001", ModelFamily.IMAGEN),
    ],
)
def test_catalog_families(model_id, family):
    assert resolve_family(model_id) is family


@pytest.mark.parametrize(
    "model_id, family",
    [
        ("imagen-5.0-generate-preview", ModelFamily.IMAGEN),
        ("gemini-3-flash-image", ModelFamily.FLASH),
        ("gemini-ultra-image", ModelFamily.PRO),
    ],
)
def test_unknown_ids_fall_back_to_naming(model_id, family, caplog):
    assert resolve_family(model_id) is family
    assert "not in the catalog" in caplog.text


def test_family_call_shapes_and_speed():
    assert ModelFamily.IMAGEN.uses_image_endpoint
    assert not ModelFamily.FLASH.uses_image_endpoint
    assert not ModelFamily.PRO.uses_image_endpoint
    assert ModelFamily.FLASH.progress_increment > ModelFamily.PRO.progress_increment
    assert ModelFamily.IMAGEN.progress_increment == ModelFamily.PRO.progress_increment


def test_default_model_is_in_catalog():
    assert get_model(DEFAULT_MODEL_ID) is not None
    assert get_model("nope") is None
    assert len({m.id for m in MODELS}) == len(MODELS)


def test_every_preset_has_a_phrase_entry():
    assert set(STYLE_PROMPTS) == set(StylePreset)
    assert STYLE_PROMPTS[StylePreset.NONE] == ""
    assert all(STYLE_PROMPTS[p] for p in StylePreset if p is not StylePreset.NONE)


def test_random_sample_prompt():
    assert random_sample_prompt(random.Random(3)) in SAMPLE_PROMPTS
