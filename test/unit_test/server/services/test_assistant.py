"""
Unit tests for the assistant's intent detection.
"""

import pytest

from vira.server.services.assistant import (
    DEFAULT_IMPLIED_CATEGORY,
    detect_intent,
    extract_implied_category,
    extract_search_terms,
)


class TestDetectIntent:
    @pytest.mark.parametrize(
        "message,category",
        [
            ("Recommend someone for web development", "web development"),
            ("I need a writer for our blog", "content"),
            ("We are looking for help on an app", "mobile app"),
            ("Which vendor is the best option?", DEFAULT_IMPLIED_CATEGORY),
        ],
    )
    def test_recommendation(self, message, category):
        intent = detect_intent(message)
        assert intent.type == "vendor_recommendation"
        assert intent.category == category

    def test_category_alone_means_recommendation(self):
        assert detect_intent("graphic design").type == "vendor_recommendation"

    def test_recommendation_wins_over_search(self):
        assert detect_intent("Show me and recommend design vendors").type == "vendor_recommendation"

    def test_search_with_category(self):
        intent = detect_intent("List vendors in SEO")
        assert intent.type == "vendor_search"
        assert intent.search_term == "seo"

    def test_search_with_name(self):
        intent = detect_intent('tell me about "Pixel Studio"')
        assert intent.type == "vendor_search"
        assert intent.search_term == "Pixel Studio"

    def test_general(self):
        assert detect_intent("Good morning!").type == "general"


def test_implied_category_rules_in_order():
    assert extract_implied_category("web content") == "content"
    assert extract_implied_category("dashboards and analytics") == "data analytics"
    assert extract_implied_category("something else") == DEFAULT_IMPLIED_CATEGORY


def test_search_terms():
    assert extract_search_terms('vendors called "Byte Forge"') == "Byte Forge"
    assert extract_search_terms("who are Pixel and Byte") == "Pixel Byte"
    assert extract_search_terms("all vendors") == "all vendors"
