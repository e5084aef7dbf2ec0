"""Shared test fixtures for uasniffer tests."""

import pathlib

import pytest

try:
    from yaml import CSafeLoader as SafeLoader, load
except ImportError:
    from yaml import SafeLoader, load  # type: ignore

from uasniffer import classifier
from uasniffer.keywords import get_keyword_table
from uasniffer.parser import UserAgentParser


FIXTURES_DIR = pathlib.Path(__file__).resolve().parent / "fixtures"


def load_test_cases():
    with (FIXTURES_DIR / "user_agents.yaml").open("rb") as f:
        return load(f, Loader=SafeLoader)["test_cases"]


@pytest.fixture(scope="session")
def keyword_table():
    return get_keyword_table()


@pytest.fixture
def parser(keyword_table):
    return UserAgentParser(keyword_table)


@pytest.fixture(autouse=True)
def clear_classification_cache():
    classifier.KNOWN_USER_AGENTS.clear()
    yield
    classifier.KNOWN_USER_AGENTS.clear()
