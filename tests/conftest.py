"""
Pytest configuration for Vyapar Sahayak tests.

Puts the repository root on the path so `config`, `main` and
`gst_compliance` import without installing the package.
"""

import os
import sys
from types import SimpleNamespace

import pytest

root_path = os.path.join(os.path.dirname(__file__), '..')
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from gst_compliance.knowledge_retriever import KnowledgeRetriever  # noqa: E402
from gst_compliance.text_generator import TemplateTextGenerator  # noqa: E402


@pytest.fixture
def sample_rows():
    return [
        {"amount": "1000", "taxRate": "18", "state": "Home State", "product": "Widget"},
        {"amount": "2000", "taxRate": "18", "state": "Other", "product": "Gadget"},
    ]


@pytest.fixture
def template_generator():
    return TemplateTextGenerator()


@pytest.fixture
def retriever():
    return KnowledgeRetriever.from_directory(None)


def fake_openai_client(create):
    """object shaped like OpenAI().chat.completions with a custom create()"""
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def completion(text):
    message = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])
