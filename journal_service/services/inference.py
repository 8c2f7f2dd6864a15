"""
Hugging Face Inference API client.

Every journal write is analysed by two hosted models: a sentiment
classifier and a named-entity recogniser. Both are queried concurrently
through the shared pooled httpx client, each with the configured retry
policy. Any failure that survives the retries raises InferenceAPIError
and the write is rejected; there is no silent NEUTRAL fallback.

Usage:
    client = HuggingFaceClient.from_settings(settings, http_client_manager)
    result = await client.analyze_content("Lunch with Anna in Berlin was lovely.")
    result.sentiment, result.keywords
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import urlparse

import httpx

from journal_service.core.tracing import get_tracer
from journal_service.services.http_client import HTTPClientManager
from journal_service.services.normalizer import (
    MalformedPayloadError,
    Sentiment,
    select_keywords,
    select_sentiment,
)
from journal_service.services.retry import RetryExhaustedError, RetryPolicy, send_with_retry

logger = logging.getLogger("Journal.Inference")
tracer = get_tracer(__name__)


class InferenceAPIError(Exception):
    """A model could not be queried or returned unusable output."""

    def __init__(self, message: str, model: str = "inference", status_code: Optional[int] = None):
        super().__init__(message)
        self.model = model
        self.status_code = status_code


@dataclass
class AnalysisResult:
    sentiment: Sentiment
    sentiment_score: Optional[float] = None
    keywords: List[str] = field(default_factory=list)


def model_name(url: str) -> str:
    """'.../models/dslim/bert-base-NER' -> 'dslim/bert-base-NER'."""
    path = urlparse(url).path.rstrip("/")
    if "/models/" in path:
        return path.split("/models/", 1)[1]
    return path.rsplit("/", 1)[-1] or url


class HuggingFaceClient:
    """Sentiment and keyword analysis against two hosted models."""

    def __init__(
        self,
        token: Optional[str],
        sentiment_url: str,
        ner_url: str,
        http_manager: HTTPClientManager,
        retry_policy: Optional[RetryPolicy] = None,
        analysis_timeout: Optional[float] = 30.0,
        sentiment_threshold: float = 0.9,
        ner_threshold: float = 0.5,
    ):
        self._token = token
        self.sentiment_url = sentiment_url
        self.ner_url = ner_url
        self._http_manager = http_manager
        self.retry_policy = retry_policy or RetryPolicy()
        self.analysis_timeout = analysis_timeout
        self.sentiment_threshold = sentiment_threshold
        self.ner_threshold = ner_threshold

        if not token:
            logger.warning("HF_TOKEN not configured, inference requests will be unauthenticated")

    @classmethod
    def from_settings(cls, settings, http_manager: HTTPClientManager) -> "HuggingFaceClient":
        return cls(
            token=settings.HF_TOKEN,
            sentiment_url=settings.HF_SENTIMENT_MODEL_URL,
            ner_url=settings.HF_NER_MODEL_URL,
            http_manager=http_manager,
            retry_policy=RetryPolicy.linear(
                max_attempts=settings.INFERENCE_MAX_ATTEMPTS,
                unit=settings.INFERENCE_BACKOFF_SECONDS,
            ),
            analysis_timeout=settings.ANALYSIS_TIMEOUT_SECONDS,
            sentiment_threshold=settings.SENTIMENT_CONFIDENCE_THRESHOLD,
            ner_threshold=settings.NER_CONFIDENCE_THRESHOLD,
        )

    @property
    def headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def query_model(self, url: str, text: str) -> Any:
        """
        POST ``{"inputs": text}`` to a model and return the decoded JSON.

        Raises:
            InferenceAPIError: retries exhausted, non-retryable status,
                or a body that is not JSON
        """
        name = model_name(url)
        client = await self._http_manager.get_client()

        async def _send() -> httpx.Response:
            return await client.post(url, headers=self.headers, json={"inputs": text})

        try:
            response = await send_with_retry(_send, self.retry_policy, label=name)
        except RetryExhaustedError as exc:
            logger.error(f"Inference call to {name} failed after {exc.attempts} attempt(s): {exc}")
            raise InferenceAPIError(str(exc), model=name, status_code=exc.status_code) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise InferenceAPIError(
                f"{name}: response is not JSON", model=name, status_code=response.status_code
            ) from exc

    async def analyze_sentiment(self, text: str) -> tuple:
        """Return ``(Sentiment, score)`` for ``text``."""
        payload = await self.query_model(self.sentiment_url, text)
        try:
            return select_sentiment(payload, self.sentiment_threshold)
        except MalformedPayloadError as exc:
            logger.error(f"Unexpected sentiment payload: {exc}")
            raise InferenceAPIError(str(exc), model=model_name(self.sentiment_url)) from exc

    async def extract_keywords(self, text: str) -> List[str]:
        payload = await self.query_model(self.ner_url, text)
        try:
            return select_keywords(payload, self.ner_threshold)
        except MalformedPayloadError as exc:
            logger.error(f"Unexpected entity payload: {exc}")
            raise InferenceAPIError(str(exc), model=model_name(self.ner_url)) from exc

    async def _run_both_models(self, text: str) -> tuple:
        """
        Query both models concurrently.

        When either call fails, the other is cancelled and awaited before the
        error propagates, so no retries or log lines outlive the request.
        """
        tasks = [
            asyncio.ensure_future(self.analyze_sentiment(text)),
            asyncio.ensure_future(self.extract_keywords(text)),
        ]
        try:
            return await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def analyze_content(self, text: str) -> AnalysisResult:
        """
        Run both models concurrently and combine the results.

        The whole analysis is bounded by ``analysis_timeout`` so a slow
        model plus retries cannot hold a request open indefinitely.
        """
        with tracer.start_as_current_span("analyze_content") as span:
            span.set_attribute("content.length", len(text))
            try:
                (sentiment, score), keywords = await asyncio.wait_for(
                    self._run_both_models(text),
                    timeout=self.analysis_timeout,
                )
            except asyncio.TimeoutError as exc:
                logger.error(f"Content analysis timed out after {self.analysis_timeout}s")
                raise InferenceAPIError(
                    f"analysis timed out after {self.analysis_timeout}s"
                ) from exc

            span.set_attribute("sentiment", sentiment.value)
            span.set_attribute("keywords.count", len(keywords))

        logger.info(
            "Content analysed",
            extra={"sentiment": sentiment.value, "keyword_count": len(keywords)},
        )
        return AnalysisResult(sentiment=sentiment, sentiment_score=score, keywords=keywords)
