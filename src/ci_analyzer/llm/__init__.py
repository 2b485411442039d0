from ci_analyzer.llm.client import LlamaClient
from ci_analyzer.llm.schemas import NO_RESPONSE, AnalysisMode, AnalysisRequest, ChatCompletion
from ci_analyzer.llm.server import LlamaServer

__all__ = [
    "LlamaClient",
    "LlamaServer",
    "AnalysisMode",
    "AnalysisRequest",
    "ChatCompletion",
    "NO_RESPONSE",
]
