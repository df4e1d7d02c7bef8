"""Shared schema fixtures."""

from __future__ import annotations

import pytest

from parthash import Choice, Node, Tuple


def build_search_schema() -> Node:
    return Tuple("search", [
        Choice("category", ["electronics", "clothing", "books"]),
        Choice("price", ["under_25", "25_to_50", "50_to_100", "over_100"]),
        Tuple("features", [
            Choice("waterproof", ["yes", "no"]),
            Choice("wireless", ["yes", "no"]),
            Choice("color", ["black", "white", "red", "blue"]),
        ]),
    ])


def build_control_schema() -> Node:
    return Choice("control_type", [
        "no_control",
        Tuple("manual", [
            Choice("speed", ["slow", "medium", "fast"]),
            Choice("direction", ["left", "right", "straight"]),
        ]),
        Tuple("automatic", [
            Choice("mode", ["eco", "sport", "comfort"]),
            Choice("target", ["home", "work", "store"]),
        ]),
        Choice("voice", ["enabled", "disabled"]),
    ])


def build_stress_schema() -> Node:
    return Tuple("comprehensive_test", [
        Choice("colors", [
            "red", "green", "blue", "yellow", "orange", "purple", "pink", "brown",
            "black", "white", "gray", "cyan", "magenta", "lime", "teal", "indigo",
        ]),
        Choice("boolean_choice", ["true", "false"]),
        Tuple("user_settings", [
            Choice("theme", ["dark", "light", "system"]),
            Choice("language", ["en", "es", "fr", "de"]),
        ]),
        Tuple("product_details", [
            Choice("size", ["xs", "s", "m", "l", "xl", "xxl"]),
            Choice("material", ["cotton", "polyester", "wool", "silk"]),
            Choice("stock", ["in_stock", "out_of_stock"]),
            Tuple("dimensions", [
                Choice("width", ["small", "medium", "large"]),
                Choice("height", ["short", "average", "tall"]),
            ]),
        ]),
        Choice("special_characters", ["!@#$", "%^&*", "()_+"]),
        Tuple("parent_config", [build_control_schema()]),
    ])


@pytest.fixture
def flag() -> Node:
    return Choice("flag", ["off", "on"])


@pytest.fixture
def pair() -> Node:
    return Tuple("t", [Choice("a", ["x", "y"]), Choice("b", ["p", "q", "r"])])


@pytest.fixture
def search() -> Node:
    return build_search_schema()


@pytest.fixture
def control() -> Node:
    return build_control_schema()


@pytest.fixture
def stress() -> Node:
    return build_stress_schema()
