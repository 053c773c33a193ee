"""
Tests for companion/services/assistant.py
Prompt assembly and failure tagging of the chat pipeline.
"""
import pytest
from unittest.mock import MagicMock, patch

from conftest import FakeGenerator
from companion.services.assistant import (
    PREAMBLE,
    AnswerGenerator,
    AssistantError,
    ChatAssistant,
    ChatTurn,
    FailureKind,
    build_prompt,
)
from companion.services.knowledge import (
    BuildRecord,
    ItemRecord,
    KnowledgeBase,
    Matches,
    Snapshot,
)


@pytest.fixture
def snapshot():
    return Snapshot(
        items=(ItemRecord(name="Stimpak", type="aid", category="Medicine", description="Restores health."),),
        builds=(BuildRecord(name="Tank Build", build_type="Tank", play_style="Melee"),),
    )


def _history(n):
    return [ChatTurn(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}") for i in range(n)]


class TestBuildPrompt:

    def test_contains_preamble_and_records(self, snapshot):
        matches = Matches(items=snapshot.items, builds=snapshot.builds)
        prompt = build_prompt(matches, [], "what heals?")

        assert prompt.startswith(PREAMBLE)
        assert "You are a helpful Fallout 76 game assistant." in prompt
        assert "Stimpak" in prompt
        assert "Tank Build" in prompt
        assert prompt.endswith("User: what heals?\nAssistant:")
        assert "Previous conversation:" not in prompt

    def test_keeps_last_six_turns(self):
        prompt = build_prompt(Matches(), _history(9), "next")

        assert "Previous conversation:\n" in prompt
        for i in range(3):
            assert f"turn {i}\n" not in prompt
        for i in range(3, 9):
            assert f"turn {i}\n" in prompt

    def test_role_labels(self):
        history = [ChatTurn(role="user", content="hi"), ChatTurn(role="model", content="hello")]
        prompt = build_prompt(Matches(), history, "next")
        assert "User: hi\nAssistant: hello\n\nUser: next\nAssistant:" in prompt


class TestChatAssistant:

    def test_answer_reports_matches(self, snapshot):
        generator = FakeGenerator(reply="Use a Stimpak.")
        kb = KnowledgeBase(loader=lambda db: snapshot)

        answer = ChatAssistant(kb, generator).answer(None, "stimpak", [])

        assert answer.text == "Use a Stimpak."
        assert len(answer.matches.items) == 1
        assert answer.matches.builds == ()
        assert "Stimpak (aid/Medicine)" in generator.prompts[0]

    def test_data_failure_is_tagged(self):
        def broken_loader(db):
            raise RuntimeError("database down")

        assistant = ChatAssistant(KnowledgeBase(loader=broken_loader), FakeGenerator())
        with pytest.raises(AssistantError) as exc:
            assistant.answer(None, "stimpak", [])
        assert exc.value.kind is FailureKind.DATA

    def test_provider_failure_is_tagged(self, snapshot):
        generator = FakeGenerator(error=ConnectionError("quota exceeded"))
        assistant = ChatAssistant(KnowledgeBase(loader=lambda db: snapshot), generator)

        with pytest.raises(AssistantError) as exc:
            assistant.answer(None, "stimpak", [])
        assert exc.value.kind is FailureKind.PROVIDER
        assert isinstance(exc.value.cause, ConnectionError)


class TestAnswerGenerator:
    """Gemini call wiring, with the SDK mocked out."""

    def test_generate_returns_text(self):
        genai = MagicMock()
        genai.GenerativeModel.return_value.generate_content.return_value = MagicMock(text="Hello wastelander")

        google = MagicMock(generativeai=genai)
        with patch.dict("sys.modules", {"google": google, "google.generativeai": genai}):
            text = AnswerGenerator(api_key="k", model_id="gemini-test").generate("prompt")

        assert text == "Hello wastelander"
        genai.configure.assert_called_once_with(api_key="k")
        genai.GenerativeModel.assert_called_once_with("gemini-test")
        genai.GenerativeModel.return_value.generate_content.assert_called_once_with("prompt")
