# ollama_novelist/errors.py
"""
Error taxonomy for the generation pipeline.

    TransportError / ServiceError   raised by the client, never retried
    PlanParseError                  recovered by the assembler (fallback plan)
    ChapterTooShort                 internal retry trigger
    ChapterGenerationExhausted      retry budget spent, aborts the run
"""

from __future__ import annotations


class NovelistError(Exception):
    """Base class for everything the pipeline raises on purpose."""


class TransportError(NovelistError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ServiceError(NovelistError):
    pass


class PlanParseError(NovelistError):
    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class ChapterTooShort(NovelistError):
    def __init__(self, length: int, minimum: int):
        super().__init__(f"chapter has {length} chars, need ≥{minimum}")
        self.length = length
        self.minimum = minimum


class ChapterGenerationExhausted(NovelistError):
    def __init__(self, key: str, attempts: int, last_length: int):
        super().__init__(
            f"{key!r}: no chapter of acceptable length after {attempts} attempts "
            f"(last one {last_length} chars)"
        )
        self.key = key
        self.attempts = attempts
        self.last_length = last_length
