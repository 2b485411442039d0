from enum import Enum

from pydantic import BaseModel

NO_RESPONSE = "No response from LLM"


class AnalysisMode(str, Enum):
    BUILD_FAILURE = "build_failure"
    TEST_FAILURE = "test_failure"
    WARNINGS = "warnings"
    REVIEW = "review"


class AnalysisRequest(BaseModel):
    """What to ask the model and the captured text to ask it about."""

    mode: AnalysisMode
    context: str = ""


class ChatMessage(BaseModel):
    role: str = "assistant"
    content: str | None = None


class ChatChoice(BaseModel):
    message: ChatMessage | None = None


class ChatCompletion(BaseModel):
    """Response of an OpenAI-compatible /v1/chat/completions endpoint."""

    choices: list[ChatChoice | None] | None = None

    def content(self) -> str:
        if not self.choices or self.choices[0] is None:
            return NO_RESPONSE
        message = self.choices[0].message
        if message is None or message.content is None:
            return NO_RESPONSE
        return message.content
