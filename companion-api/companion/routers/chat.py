"""
Chat router - game assistant grounded on the knowledge snapshot.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from companion.core.policy import Action, enforce
from companion.deps import get_answer_generator, get_current_user, get_db, get_knowledge_base
from companion.models.user import User
from companion.schemas.chat import (
    ChatFailureOut,
    ChatMessageIn,
    ChatMessageOut,
    RefreshOut,
    RelevantDataOut,
    SuggestionsOut,
)
from companion.services.assistant import (
    FALLBACK_MESSAGE,
    SUGGESTIONS,
    AnswerGenerator,
    AssistantError,
    ChatAssistant,
    ChatTurn,
)
from companion.services.knowledge import KnowledgeBase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "/message",
    response_model=ChatMessageOut,
    responses={500: {"model": ChatFailureOut}},
)
def send_message(
    payload: ChatMessageIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    knowledge: KnowledgeBase = Depends(get_knowledge_base),
    generator: AnswerGenerator = Depends(get_answer_generator),
):
    """Answer a chat message. Guests may chat."""
    history = [ChatTurn(role=t.role, content=t.content) for t in payload.conversation_history]
    assistant = ChatAssistant(knowledge, generator)

    try:
        answer = assistant.answer(db, payload.message, history)
    except AssistantError as e:
        logger.error(f"[Chat] {e.kind.value} failure for user {user.id}: {e.cause!r}")
        return JSONResponse(
            status_code=500,
            content=ChatFailureOut(
                message=FALLBACK_MESSAGE,
                error="AI service temporarily unavailable",
            ).model_dump(),
        )

    return ChatMessageOut(
        message=answer.text,
        relevant_data=RelevantDataOut(
            items=len(answer.matches.items),
            builds=len(answer.matches.builds),
        ),
    )


@router.get("/suggestions", response_model=SuggestionsOut)
def suggestions():
    return SuggestionsOut(suggestions=SUGGESTIONS)


@router.post("/refresh-data", response_model=RefreshOut)
def refresh_data(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    knowledge: KnowledgeBase = Depends(get_knowledge_base),
):
    enforce(user, Action.REFRESH_KNOWLEDGE)

    snapshot = knowledge.refresh(db)
    logger.info(f"[Chat] Knowledge refreshed by {user.username}")
    return RefreshOut(
        message="Game data refreshed successfully",
        item_count=len(snapshot.items),
        build_count=len(snapshot.builds),
    )
