"""
Chat assistant: retrieval -> prompt -> Gemini.

Every failure along the way surfaces as an AssistantError tagged with the
stage that failed, so the route can log the kind while answering the caller
with one uniform fallback message.
"""
import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from companion.core.config import settings
from companion.services.knowledge import KnowledgeBase, Matches, format_context, search

logger = logging.getLogger(__name__)

HISTORY_TURNS = 6

PREAMBLE = (
    "You are a helpful Fallout 76 game assistant. You help players with builds, items, locations, and strategies. "
    "Always be helpful, friendly, and provide accurate information based on the game data provided. "
    "If you don't have specific information, say so and provide general helpful advice.\n\n"
)

FALLBACK_MESSAGE = (
    "I'm sorry, I'm having trouble connecting to my knowledge base right now. "
    "Please try again in a moment, or check the items and builds sections for the information you need."
)

SUGGESTIONS = [
    "What's the best build for solo PvE content?",
    "Where can I find legendary weapons?",
    "How do I optimize my SPECIAL stats?",
    "What are the best locations for farming caps?",
    "Which perks are essential for a stealth build?",
    "How do I get better armor in Fallout 76?",
    "What's the difference between energy and ballistic damage?",
    "Where can I find plans for power armor mods?",
    "What are the best weapons for a heavy gunner build?",
    "How do I manage my carry weight effectively?",
]


class FailureKind(str, Enum):
    DATA = "data"
    PROMPT = "prompt"
    PROVIDER = "provider"


class AssistantError(Exception):
    def __init__(self, kind: FailureKind, cause: Exception):
        super().__init__(f"{kind.value}: {cause}")
        self.kind = kind
        self.cause = cause


@dataclass(frozen=True)
class ChatTurn:
    role: str
    content: str


@dataclass(frozen=True)
class Answer:
    text: str
    matches: Matches


def build_prompt(matches: Matches, history: list[ChatTurn], message: str) -> str:
    prompt = PREAMBLE + format_context(matches)

    recent = history[-HISTORY_TURNS:] if history else []
    if recent:
        prompt += "Previous conversation:\n"
        for turn in recent:
            speaker = "User" if turn.role == "user" else "Assistant"
            prompt += f"{speaker}: {turn.content}\n"
        prompt += "\n"

    prompt += f"User: {message}\nAssistant:"
    return prompt


class AnswerGenerator:
    """Hosted text completion through the google-generativeai SDK."""

    def __init__(self, api_key: str | None = None, model_id: str | None = None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model_id = model_id or settings.GEMINI_MODEL

    def generate(self, prompt: str) -> str:
        import google.generativeai as genai

        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(self.model_id)
        resp = model.generate_content(prompt)
        return getattr(resp, "text", "") or ""


class ChatAssistant:
    def __init__(self, knowledge: KnowledgeBase, generator: AnswerGenerator):
        self.knowledge = knowledge
        self.generator = generator

    def answer(self, db: Session, message: str, history: list[ChatTurn]) -> Answer:
        try:
            snapshot = self.knowledge.snapshot(db)
            matches = search(message, snapshot)
        except Exception as e:
            raise AssistantError(FailureKind.DATA, e) from e

        try:
            prompt = build_prompt(matches, history, message)
        except Exception as e:
            raise AssistantError(FailureKind.PROMPT, e) from e

        try:
            text = self.generator.generate(prompt)
        except Exception as e:
            raise AssistantError(FailureKind.PROVIDER, e) from e

        logger.info(
            f"[Chat] Answered with {len(matches.items)} items, {len(matches.builds)} builds in context"
        )
        return Answer(text=text, matches=matches)
