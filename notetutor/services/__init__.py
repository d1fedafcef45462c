"""Services for external integrations and request orchestration."""

from notetutor.services.chat_service import ChatService
from notetutor.services.file_extractor import file_extractor
from notetutor.services.identity import IdentityVerifier, build_identity_verifier
from notetutor.services.llm import CompletionClient, build_completion_client
from notetutor.services.quiz_service import QuizService

__all__ = [
    "ChatService",
    "CompletionClient",
    "IdentityVerifier",
    "QuizService",
    "build_completion_client",
    "build_identity_verifier",
    "file_extractor",
]
