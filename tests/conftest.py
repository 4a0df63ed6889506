"""
Shared fixtures: a fake google-genai client and response builders.

The fakes mimic only what the generator touches:
  client.aio.models.generate_images(**kw)  → .generated_images[i].image.image_bytes
  client.aio.models.generate_content(**kw) → .candidates[i].content.parts[j].inline_data.data
"""

import asyncio
import io
from types import SimpleNamespace

import pytest
from PIL import Image

from text2image.models import GenerationSettings


class FakeModels:
    """Records every call; returns a canned response or raises a canned error."""

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response
        self.error = error
        self.delay = delay
        self.calls = []

    async def _respond(self, name, kwargs):
        self.calls.append((name, kwargs))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    async def generate_images(self, **kwargs):
        return await self._respond("generate_images", kwargs)

    async def generate_content(self, **kwargs):
        return await self._respond("generate_content", kwargs)


def make_client(models):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def images_response(*payloads):
    return SimpleNamespace(
        generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=p)) for p in payloads]
    )


def text_part(text):
    return SimpleNamespace(text=text, inline_data=None)


def image_part(data, mime_type="image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def content_response(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


class ProgressRecorder:
    def __init__(self):
        self.values = []

    def __call__(self, percent):
        self.values.append(percent)


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color="purple").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings():
    return GenerationSettings(prompt="a lighthouse in a storm")


@pytest.fixture
def recorder():
    return ProgressRecorder()
