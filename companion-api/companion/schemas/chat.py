from pydantic import AliasChoices, BaseModel, Field, field_validator


class HistoryTurnIn(BaseModel):
    role: str = "user"
    content: str = ""


class ChatMessageIn(BaseModel):
    message: str
    # The web client sends camelCase
    conversation_history: list[HistoryTurnIn] = Field(
        default_factory=list,
        validation_alias=AliasChoices("conversation_history", "conversationHistory"),
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message is required")
        return v


class RelevantDataOut(BaseModel):
    items: int
    builds: int


class ChatMessageOut(BaseModel):
    message: str
    relevant_data: RelevantDataOut


class ChatFailureOut(BaseModel):
    message: str
    error: str


class SuggestionsOut(BaseModel):
    suggestions: list[str]


class RefreshOut(BaseModel):
    message: str
    item_count: int
    build_count: int
