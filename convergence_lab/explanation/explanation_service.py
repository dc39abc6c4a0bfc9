"""
Explanation Service
===================

Optional commentary on the current CLT view from a hosted language
model.

The simulation only hands over (distribution, n, M) and treats the
reply as opaque text. Any failure of the remote service becomes a fixed
fallback message; it never raises into the caller and never touches
simulation state.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..distributions.distribution_library import Distribution

EMPTY_RESPONSE_MESSAGE: str = "Could not generate an explanation."
ERROR_MESSAGE: str = "An error occurred while fetching the explanation. Please try again."

DEFAULT_MODEL: str = "gemini-3-pro-preview"


@dataclass(frozen=True)
class ExplanationRequest:
    """The only simulation data shared with the advisory service."""
    distribution: Distribution
    sample_size: int
    total_simulations: int


class AbstractExplanationClient(ABC):
    """Abstract base class for text-generation backends."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return generated text for the prompt."""
        pass


class GeminiExplanationClient(AbstractExplanationClient):
    """
    Text generation through the Google Gen AI SDK.

    Requires the `explain` extra (google-genai). The API key is read from
    GEMINI_API_KEY, then API_KEY, when not passed explicitly.
    """

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL) -> None:
        from google import genai

        self.model: str = model
        self.client = genai.Client(
            api_key=api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        )

    def generate(self, prompt: str) -> str:
        response = self.client.models.generate_content(model=self.model, contents=prompt)
        return response.text or ""


def build_prompt(request: ExplanationRequest) -> str:
    """Compose the question sent to the model."""
    return (
        "A student is watching a simulation of the Central Limit Theorem in which "
        "the sample size n is increased step by step.\n"
        f"Underlying distribution: {request.distribution.value}.\n"
        f"Current sample size (n): {request.sample_size}.\n"
        f"Number of simulated sample means (M): {request.total_simulations} (fixed).\n"
        "The chart shows a density histogram of the sample means next to the "
        "normal curve with mean mu and standard deviation sigma / sqrt(n).\n\n"
        "In two or three sentences addressed to the student, explain why the "
        "histogram matches the curve better as n grows, how the narrowing of the "
        "curve relates to the standard error sigma / sqrt(n), and that this happens "
        "whatever the shape of the original distribution. Use Markdown bold for "
        "key terms."
    )


class ExplanationService:
    """
    Fetches commentary and converts every failure into a message.

    Usage:
        service = ExplanationService(GeminiExplanationClient())
        text = service.explain(ExplanationRequest(Distribution.DICE, 10, 2000))
    """

    def __init__(self, client: AbstractExplanationClient, verbose: bool = True) -> None:
        self.client: AbstractExplanationClient = client
        self.verbose: bool = verbose

    def explain(self, request: ExplanationRequest) -> str:
        """
        Return the model's explanation, or a fallback message.

        Returns:
            The generated text; EMPTY_RESPONSE_MESSAGE for an empty reply;
            ERROR_MESSAGE if the client raised.
        """
        try:
            text: str = self.client.generate(build_prompt(request))
        except Exception as error:
            if self.verbose:
                print(f"ERROR: Explanation service failed: {error}")
            return ERROR_MESSAGE

        if not text or not text.strip():
            return EMPTY_RESPONSE_MESSAGE
        return text
