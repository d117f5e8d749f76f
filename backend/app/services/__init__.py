"""Grounding pipeline services."""

from app.services.answering_engine import AnsweringEngine, AskResult
from app.services.context_assembler import ContextAssembler
from app.services.conversation_log import ConversationLog, conversation_log
from app.services.corpus_resolver import CorpusResolver
from app.services.ingestion import DocumentIngestor
from app.services.llm import AnthropicGenerator, TextGenerator
from app.services.study_set_generator import StudySetGenerator
from app.services.text_extractor import TextExtractor, text_extractor

__all__ = [
    "AnsweringEngine",
    "AskResult",
    "ContextAssembler",
    "ConversationLog",
    "conversation_log",
    "CorpusResolver",
    "DocumentIngestor",
    "AnthropicGenerator",
    "TextGenerator",
    "StudySetGenerator",
    "TextExtractor",
    "text_extractor",
]
