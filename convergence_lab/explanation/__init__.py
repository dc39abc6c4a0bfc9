"""
Explanation Module
==================

This module provides optional text commentary on the CLT simulation.
"""

from .explanation_service import (
    AbstractExplanationClient,
    GeminiExplanationClient,
    ExplanationRequest,
    ExplanationService,
    build_prompt,
    EMPTY_RESPONSE_MESSAGE,
    ERROR_MESSAGE
)

__all__ = [
    "AbstractExplanationClient",
    "GeminiExplanationClient",
    "ExplanationRequest",
    "ExplanationService",
    "build_prompt",
    "EMPTY_RESPONSE_MESSAGE",
    "ERROR_MESSAGE"
]
