"""ViRA assistant: conversational access to vendor intelligence.

Messages are routed by keyword intent detection:

- ``vendor_recommendation``: run ViRA Match for the detected (or implied)
  service category, using the message as the project scope.
- ``vendor_search``: look up active vendors by name, category or specialty.
- ``general``: answered by the LLM with the recent conversation, or with a
  canned reply when no model is configured.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from pydantic_ai import Agent

from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ViraError
from vira.core.logging_config import get_logger
from vira.core.models.io.matching import ChatMessage, ChatResponse, ChatVendor
from vira.core.monitoring import log_llm_call

from .llm import model_name
from .matching import semantic_match

logger = get_logger(__name__)

RECOMMENDATION_KEYWORDS = (
    "recommend", "suggestion", "find vendors", "best vendor", "who should i",
    "vendors for", "need a vendor", "looking for", "project", "help with",
    "what vendors", "which vendor", "i need", "need help", "suggest", "find me",
    "for my project", "for this project", "best option", "good vendor",
)

SEARCH_KEYWORDS = (
    "show me", "list", "vendors in", "who are", "tell me about", "vendors that",
    "vendors with", "find all", "display", "see all", "all vendors", "available vendors",
)

SERVICE_CATEGORIES = (
    "web development", "mobile app", "data analytics", "content writing", "automotive content",
    "content", "graphic design", "design", "marketing", "seo", "ecommerce", "e-commerce", "crm",
    "consulting", "writing", "copywriting", "app development", "development", "website",
)

# Checked in order; the first rule whose words appear wins
IMPLIED_CATEGORY_RULES = (
    (("writer", "writing", "content"), "content"),
    (("website", "web", "development"), "web development"),
    (("app", "mobile"), "mobile app"),
    (("data", "analytics"), "data analytics"),
    (("design", "graphic"), "design"),
    (("marketing", "seo"), "marketing"),
)
DEFAULT_IMPLIED_CATEGORY = "consulting"

GENERAL_SYSTEM_PROMPT = (
    "You are ViRA, an assistant for a vendor relationship management team. "
    "Answer questions about working with vendors, rating projects and using ViRA. "
    "Be concise and practical."
)

CANNED_GENERAL_REPLY = (
    "I can recommend vendors for a project (for example: \"recommend a vendor for web development\") "
    "or look up vendors (for example: \"show me vendors in design\")."
)

HISTORY_WINDOW = 6


@dataclass(frozen=True)
class Intent:
    type: str
    category: Optional[str] = None
    search_term: Optional[str] = None


def extract_implied_category(message: str) -> str:
    lower = message.lower()
    for words, category in IMPLIED_CATEGORY_RULES:
        if any(word in lower for word in words):
            return category
    return DEFAULT_IMPLIED_CATEGORY


def extract_search_terms(message: str) -> str:
    """Quoted text if present, else capitalized words, else the whole message."""
    quoted = re.search(r'"([^"]+)"', message)
    if quoted:
        return quoted.group(1)
    capitalized = re.findall(r"\b[A-Z][a-z]+\b", message)
    if capitalized:
        return " ".join(capitalized)
    return message


def detect_intent(message: str) -> Intent:
    """Classify a chat message. Recommendation wins over search when both match."""
    lower = message.lower()
    wants_recommendation = any(keyword in lower for keyword in RECOMMENDATION_KEYWORDS)
    wants_search = any(keyword in lower for keyword in SEARCH_KEYWORDS)
    category = next((c for c in SERVICE_CATEGORIES if c in lower), None)

    if wants_recommendation or (category and not wants_search):
        return Intent(type="vendor_recommendation", category=category or extract_implied_category(message))
    if wants_search or category:
        return Intent(type="vendor_search", search_term=category or extract_search_terms(message))
    return Intent(type="general")


def _format_history(history: Sequence[ChatMessage], message: str) -> str:
    lines = [f"{m.role}: {m.content}" for m in history[-HISTORY_WINDOW:]]
    lines.append(f"user: {message}")
    return "\n".join(lines)


class ChatAssistant:
    """Answers one chat turn."""

    def __init__(self, repos: RepositoryBundle, *, model: Any | None = None, top_candidates: int = 5) -> None:
        self._repos = repos
        self._model = model
        self._top_candidates = top_candidates

    async def respond(self, message: str, history: Sequence[ChatMessage] = ()) -> ChatResponse:
        intent = detect_intent(message)
        logger.debug(f"Chat intent: {intent}")
        if intent.type == "vendor_recommendation":
            return await self._recommend(message, intent)
        if intent.type == "vendor_search":
            return await self._search(intent)
        return await self._general(message, history)

    async def _recommend(self, message: str, intent: Intent) -> ChatResponse:
        category = intent.category or DEFAULT_IMPLIED_CATEGORY
        try:
            result = await semantic_match(
                self._repos, category, message, model=self._model, top_candidates=self._top_candidates
            )
        except ViraError as e:
            logger.error(f"Assistant recommendation failed: {e.message}", exc_info=True)
            return ChatResponse(
                response="I'm having trouble accessing the vendor recommendation system right now.",
                intent=intent.type,
                category=category,
            )

        if not result.matches:
            text = (
                f'I couldn\'t find any vendors matching "{category}". '
                "Try a different service category or check that active vendors offer it."
            )
            return ChatResponse(response=text, intent=intent.type, category=category, matches=[])

        lines = [f"Based on your request for {category} services, here are my top recommendations:", ""]
        for index, match in enumerate(result.matches[:3], start=1):
            lines.append(f"**{index}. {match.vendor_name}** ({match.vira_score}% match)")
            lines.append(match.reason[:150] + ("..." if len(match.reason) > 150 else ""))
            lines.append(f"Key strengths: {', '.join(match.key_strengths)}")
            lines.append("")
        lines.append(f"I analyzed {result.query_info.candidates_analyzed} vendors for this recommendation.")
        return ChatResponse(
            response="\n".join(lines),
            intent=intent.type,
            category=category,
            matches=result.matches[:3],
            metadata={"used_fallback": str(result.query_info.used_fallback).lower()},
        )

    async def _search(self, intent: Intent) -> ChatResponse:
        term = intent.search_term or ""
        vendors = await self._repos.vendors.search_active(term, limit=10)
        found = [
            ChatVendor(
                vendor_id=v.vendor_id,
                vendor_name=v.vendor_name,
                service_categories=list(v.service_categories or []),
                specialties=v.specialties,
            )
            for v in vendors
        ]
        if not found:
            text = f'I couldn\'t find any active vendors matching "{term}".'
        else:
            names = "\n".join(
                f"- {v.vendor_name} ({', '.join(v.service_categories) or 'no categories listed'})" for v in found
            )
            text = f'I found {len(found)} vendor(s) matching "{term}":\n{names}'
        return ChatResponse(response=text, intent=intent.type, vendors=found)

    async def _general(self, message: str, history: Sequence[ChatMessage]) -> ChatResponse:
        if self._model is None:
            return ChatResponse(response=CANNED_GENERAL_REPLY, intent="general")

        agent: Agent = Agent(self._model, output_type=str, system_prompt=GENERAL_SYSTEM_PROMPT)
        started = time.perf_counter()
        try:
            result = await agent.run(_format_history(list(history), message))
        except Exception as e:
            log_llm_call(model_name(self._model), "chat", (time.perf_counter() - started) * 1000, False)
            logger.error(f"Assistant LLM call failed: {e}", exc_info=True)
            return ChatResponse(
                response="I'm having trouble answering right now. Please try again in a moment.",
                intent="general",
            )
        log_llm_call(model_name(self._model), "chat", (time.perf_counter() - started) * 1000, True)
        return ChatResponse(response=result.output, intent="general")
