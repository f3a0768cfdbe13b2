from dataclasses import dataclass
from loguru import logger
from openai import OpenAI
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type


SYSTEM_PROMPT = (
    "You are Vyapar Sahayak, an AI assistant specializing in Indian GST compliance for small businesses. "
    "Provide helpful, accurate responses based on Indian GST laws and regulations. "
    "If you're unsure about something, acknowledge the limitation and suggest consulting a tax professional. "
    "Keep your response concise and practical."
)


class TextGenerationError(RuntimeError):
    """text generation service failed or returned nothing usable"""


@dataclass(frozen=True)
class GenerationResult:
    text: str
    generated: bool  # False when the deterministic fallback was used


class TextGenerator:
    """
    capability that turns a prompt into text
    every variant must return the supplied fallback instead of failing
    """

    name = "base"

    def generate(self, prompt, fallback) -> GenerationResult:
        raise NotImplementedError


class TemplateTextGenerator(TextGenerator):
    """deterministic generator, always answers with the fallback template"""

    name = "template"

    def generate(self, prompt, fallback):
        return GenerationResult(text=fallback, generated=False)


class OpenAITextGenerator(TextGenerator):
    """delegates to the OpenAI chat API, falls back on any failure"""

    name = "openai"

    def __init__(self, client, model="gpt-4o-mini", temperature=0.3, max_tokens=800):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        logger.info(f"OpenAITextGenerator ready (model={model})")

    @classmethod
    def from_api_key(cls, api_key, timeout=20.0, **kwargs):
        # SDK retries off, tenacity below owns the retry budget
        client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        return cls(client, **kwargs)

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(Exception),
        reraise=True
    )
    def _complete(self, prompt):
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )

        text = response.choices[0].message.content
        if not text or not text.strip():
            raise TextGenerationError("Empty completion")
        return text.strip()

    def generate(self, prompt, fallback):
        try:
            text = self._complete(prompt)
            logger.debug(f"Generated {len(text)} chars with {self.model}")
            return GenerationResult(text=text, generated=True)

        except Exception as e:
            logger.warning(f"Text generation failed, using fallback: {str(e)}")
            return GenerationResult(text=fallback, generated=False)


def build_text_generator(config):
    """pick the generator variant from configuration"""
    if config.OPENAI_API_KEY:
        try:
            generator = OpenAITextGenerator.from_api_key(
                api_key=config.OPENAI_API_KEY,
                timeout=config.TEXT_GENERATION_TIMEOUT,
                model=config.OPENAI_MODEL,
                temperature=config.OPENAI_TEMPERATURE
            )
            logger.success("Using OpenAI text generation")
            return generator
        except Exception as e:
            logger.error(f"Failed to init OpenAI client: {str(e)}")

    logger.info("OpenAI not configured, using template responses")
    return TemplateTextGenerator()
