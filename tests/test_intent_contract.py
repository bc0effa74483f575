"""
IntentClassifier contract tests.

Runs the shared contract against MessageClassifier backed by:
  - SimulatorLanguageModel  (always, no API key needed)
  - ClaudeLanguageModel     (skipped without ANTHROPIC_API_KEY)
  - OpenAILanguageModel     (skipped without OPENAI_API_KEY)
"""

import os

import pytest

from cleanstay.adapters.claude_model import ClaudeLanguageModel
from cleanstay.adapters.openai_model import OpenAILanguageModel
from cleanstay.adapters.simulator_model import SimulatorLanguageModel
from cleanstay.classifier import MessageClassifier
from tests.contracts.intent_classifier_contract import IntentClassifierContract


class TestSimulatorBackedClassifier(IntentClassifierContract):

    def create_classifier(self):
        return MessageClassifier(SimulatorLanguageModel())


@pytest.mark.skipif(
    not os.environ.get("ANTHROPIC_API_KEY"),
    reason="ANTHROPIC_API_KEY not set",
)
class TestClaudeBackedClassifier(IntentClassifierContract):

    def create_classifier(self):
        return MessageClassifier(ClaudeLanguageModel(), timeout=30)


@pytest.mark.skipif(
    not os.environ.get("OPENAI_API_KEY"),
    reason="OPENAI_API_KEY not set",
)
class TestOpenAIBackedClassifier(IntentClassifierContract):

    def create_classifier(self):
        return MessageClassifier(OpenAILanguageModel(), timeout=30)
