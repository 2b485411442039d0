import httpx
from pydantic import ValidationError

from ci_analyzer.config import Settings
from ci_analyzer.errors import InferenceError
from ci_analyzer.llm.prompts import render_prompt
from ci_analyzer.llm.schemas import NO_RESPONSE, AnalysisRequest, ChatCompletion

COMPLETIONS_PATH = "/v1/chat/completions"
REQUEST_TIMEOUT = 300.0
TEMPERATURE = 0.1
MAX_TOKENS = 1024


class LlamaClient:
    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.system_prompt = settings.system_prompt
        self.http = httpx.Client(
            base_url=settings.llama_url,
            timeout=REQUEST_TIMEOUT,
            transport=transport,
        )

    def analyze(self, request: AnalysisRequest) -> str:
        prompt = render_prompt(request.mode, request.context)
        return self.query(self.system_prompt, prompt)

    def query(self, system_prompt: str, user_prompt: str) -> str:
        """Send one chat completion request and return the reply text."""
        payload = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
            "stream": False,
        }

        try:
            response = self.http.post(COMPLETIONS_PATH, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise InferenceError(f"LLM request timed out after {REQUEST_TIMEOUT:.0f}s") from e
        except httpx.HTTPStatusError as e:
            raise InferenceError(f"LLM server returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise InferenceError(f"LLM request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise InferenceError("LLM server returned a non-JSON response") from e

        try:
            completion = ChatCompletion.model_validate(body)
        except ValidationError:
            return NO_RESPONSE

        return completion.content()

    def close(self):
        self.http.close()

    def __enter__(self) -> "LlamaClient":
        return self

    def __exit__(self, *exc_info):
        self.close()
