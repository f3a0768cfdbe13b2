from types import SimpleNamespace

from conftest import completion, fake_openai_client
from gst_compliance.text_generator import (
    OpenAITextGenerator,
    TemplateTextGenerator,
    build_text_generator,
)


def test_template_returns_fallback():
    result = TemplateTextGenerator().generate("prompt", fallback="fixed text")
    assert result.text == "fixed text"
    assert result.generated is False


def test_openai_generator_uses_completion():
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        return completion("  Generated plan  ")

    generator = OpenAITextGenerator(fake_openai_client(create), model="test-model")
    result = generator.generate("Make a plan", fallback="fallback")

    assert result.text == "Generated plan"
    assert result.generated is True
    assert calls[0]["model"] == "test-model"
    assert calls[0]["messages"][-1]["content"] == "Make a plan"


def test_openai_generator_falls_back_on_error():
    def create(**kwargs):
        raise TimeoutError("service unavailable")

    generator = OpenAITextGenerator(fake_openai_client(create))
    result = generator.generate("Make a plan", fallback="fallback")

    assert result.text == "fallback"
    assert result.generated is False


def test_openai_generator_falls_back_on_empty_reply():
    generator = OpenAITextGenerator(fake_openai_client(lambda **kwargs: completion("   ")))
    result = generator.generate("Make a plan", fallback="fallback")
    assert result.text == "fallback"
    assert result.generated is False


def test_build_without_key_is_template():
    config = SimpleNamespace(OPENAI_API_KEY="", OPENAI_MODEL="m", OPENAI_TEMPERATURE=0.0, TEXT_GENERATION_TIMEOUT=5)
    assert isinstance(build_text_generator(config), TemplateTextGenerator)


def test_build_with_key_is_openai():
    config = SimpleNamespace(OPENAI_API_KEY="sk-test", OPENAI_MODEL="m", OPENAI_TEMPERATURE=0.0, TEXT_GENERATION_TIMEOUT=5)
    generator = build_text_generator(config)
    assert isinstance(generator, OpenAITextGenerator)
    assert generator.model == "m"
