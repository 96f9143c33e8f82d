import json
import re
import logging
from typing import Any, Dict, List, Optional

import httpx

from knowledge_extractor.core.common.enums import Sentiment
from knowledge_extractor.core.common.errors import ProviderError
from ..domain.interfaces import ILLMAdapter
from ..domain.models import AnalysisResult
from .keyword_extractor import extract_top_keywords

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openai.com/v1/responses"
DEFAULT_MODEL = "gpt-5-nano"

# Used when the model answers in prose instead of JSON
UNSTRUCTURED_TITLE = "Generated Title"
UNSTRUCTURED_CONFIDENCE = 0.9


class OpenAIResponsesAdapter(ILLMAdapter):
    """
    Remote provider backed by the OpenAI Responses API.
    One synchronous call per analysis, bounded by a timeout, never retried.
    """

    def __init__(self,
                 api_key: str,
                 model: str = DEFAULT_MODEL,
                 api_url: str = DEFAULT_API_URL,
                 timeout: float = 30.0,
                 client: Optional[httpx.Client] = None):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    def analyze_text(self, text: str) -> AnalysisResult:
        payload = {
            "model": self.model,
            "input": self._build_prompt(text),
            "store": False,
        }

        response = self._post(payload)

        if not response.is_success:
            raise ProviderError(f"error {response.status_code}: {self._decode_error_body(response)}")

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(f"undecodable response body: {e}") from e

        output = self._extract_output_text(body)
        if not output:
            raise ProviderError("empty response")

        return self._parse_response(output, text)

    def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            if self._client is not None:
                return self._client.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            with httpx.Client(timeout=self.timeout) as client:
                return client.post(self.api_url, json=payload, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProviderError(f"request to {self.api_url} failed: {e}") from e

    @staticmethod
    def _decode_error_body(response: httpx.Response) -> Any:
        # Best effort: the body is diagnostic only
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _extract_output_text(body: Any) -> str:
        """
        Walks output[].content[] and returns the first text found.
        Reasoning items carry no content and are skipped.
        """
        if not isinstance(body, dict):
            return ""
        for item in body.get("output") or []:
            if not isinstance(item, dict):
                continue
            for content in item.get("content") or []:
                text = content.get("text") if isinstance(content, dict) else None
                # Only non-empty strings count as output
                if isinstance(text, str) and text:
                    return text
        return ""

    def _build_prompt(self, text: str) -> str:
        return (
            "Analyze this text and return JSON with fields: summary, title, topics, "
            "sentiment, keywords, confidence.\n"
            "- summary: 1-2 sentences\n"
            "- topics: exactly 3 short topics\n"
            "- sentiment: one of positive, neutral, negative\n"
            "- keywords: the 3 most relevant nouns\n"
            "- confidence: a number between 0 and 1\n\n"
            f"{text}"
        )

    def _parse_response(self, output: str, source_text: str) -> AnalysisResult:
        data = self._load_json_object(output)

        if data is None:
            logger.info("Model output was not JSON; using raw text as summary")
            keywords = extract_top_keywords(source_text)
            return AnalysisResult(
                summary=output.strip(),
                title=UNSTRUCTURED_TITLE,
                topics=list(keywords),
                sentiment=Sentiment.NEUTRAL.value,
                keywords=keywords,
                confidence=UNSTRUCTURED_CONFIDENCE
            )

        keywords = _as_string_list(data.get("keywords")) or extract_top_keywords(source_text)
        return AnalysisResult(
            summary=str(data.get("summary") or output.strip()),
            title=str(data.get("title") or UNSTRUCTURED_TITLE),
            topics=_as_string_list(data.get("topics")),
            sentiment=_normalize_sentiment(data.get("sentiment")),
            keywords=keywords,
            confidence=_normalize_confidence(data.get("confidence"))
        )

    @staticmethod
    def _load_json_object(output: str) -> Optional[Dict[str, Any]]:
        # Extract JSON block using regex in case of conversational filler
        json_match = re.search(r"\{.*\}", output, re.DOTALL)
        candidate = json_match.group() if json_match else output
        try:
            data = json.loads(candidate)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None


def _as_string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def _normalize_sentiment(value: Any) -> str:
    candidate = str(value or "").strip().lower()
    if candidate in {s.value for s in Sentiment}:
        return candidate
    return Sentiment.NEUTRAL.value


def _normalize_confidence(value: Any) -> float:
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return UNSTRUCTURED_CONFIDENCE
    if confidence != confidence:  # NaN
        return UNSTRUCTURED_CONFIDENCE
    return min(max(confidence, 0.0), 1.0)
