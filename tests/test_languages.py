import pytest

from uasniffer.languages import client_ip, filter_language_tag, parse_accept_language, preferred_language


def test_ranges_are_grouped_by_quality():
    ranges = parse_accept_language("fr-CH, fr;q=0.9, en;q=0.8, de;q=0.7, *;q=0.5")
    assert ranges.by_quality == {
        1.0: ["fr_ch"],
        0.9: ["fr"],
        0.8: ["en"],
        0.7: ["de"],
    }
    assert ranges.ordered() == ["fr_ch", "fr", "en", "de"]


def test_header_order_kept_within_quality():
    ranges = parse_accept_language("en;q=0.5, da, en-gb, fr;q=0.5")
    assert ranges.ordered() == ["da", "en_gb", "en", "fr"]


def test_zero_quality_is_refused():
    assert parse_accept_language("de;q=0, en").ordered() == ["en"]


def test_invalid_quality_is_skipped(caplog):
    assert parse_accept_language("de;q=high, en;q=2, fr;q=0.5").ordered() == ["fr"]
    assert "de;q=high" in caplog.text


@pytest.mark.parametrize("header", [None, "", " , ,"])
def test_empty_header(header):
    assert parse_accept_language(header).ordered() == []


def test_filter_language_tag():
    assert filter_language_tag("en_gb", None) == "en_gb"
    assert filter_language_tag("en-gb", ["en_gb"]) == "en_gb"
    assert filter_language_tag("en_gb", ["en", "fr"]) == "en"
    assert filter_language_tag("de", ["en", "fr"]) is None


def test_preferred_language():
    assert preferred_language("da, en-gb;q=0.8") == "da"
    assert preferred_language("de;q=0.5, fr-ca", ["fr", "de"]) == "fr"
    assert preferred_language("it", ["fr", "de"]) == "fr"
    assert preferred_language(None) == "en"
    assert preferred_language("*", default="pt-BR") == "pt_BR"


def test_client_ip():
    assert client_ip("203.0.113.195, 70.41.3.18", "10.0.0.1") == "203.0.113.195"
    assert client_ip(None, "10.0.0.1") == "10.0.0.1"
    assert client_ip("", "10.0.0.1") == "10.0.0.1"
    assert client_ip(None, None) is None
