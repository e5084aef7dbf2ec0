import pytest

from uasniffer.keywords import KeywordTable, KeywordTableError, dumps, load_keyword_table, loads
from uasniffer.models import Classification, DeviceCategory, EntityKind


def test_packaged_table_loads(keyword_table):
    assert len(keyword_table) > 100
    assert keyword_table["windows nt"] == Classification(EntityKind.OS, None)
    assert keyword_table["googlebot"] == Classification(EntityKind.FORCE_BROWSER, DeviceCategory.ROBOT)
    assert keyword_table["tablet"] == Classification(None, DeviceCategory.TABLET)
    assert keyword_table["compatible"] == Classification(None, None)


def test_packaged_table_round_trip(keyword_table):
    reloaded = loads(dumps(keyword_table))
    assert reloaded == keyword_table
    assert dumps(reloaded) == dumps(keyword_table)


def test_comments_and_blank_lines_are_ignored():
    table = loads(
        """
        # browsers
        chrome=BROWSER

        ipad=os,tablet   # kinds and devices are case-insensitive
        """
    )
    assert dict(table) == {
        "chrome": Classification(EntityKind.BROWSER, None),
        "ipad": Classification(EntityKind.OS, DeviceCategory.TABLET),
    }


def test_tokens_are_lower_cased():
    table = loads("Mac OS X=OS,DESKTOP\n")
    assert list(table) == ["mac os x"]
    assert table.classify("MAC OS X") == Classification(EntityKind.OS, DeviceCategory.DESKTOP)
    assert table.classify("unknown") is None


def test_device_only_entries():
    table = loads("smarttv=,TV\nu=\n")
    assert table["smarttv"] == Classification(None, DeviceCategory.TV)
    assert table["u"] == Classification(None, None)
    assert dumps(table) == "smarttv=,TV\nu=\n"


def test_last_definition_wins(caplog):
    table = loads("opera=BROWSER\nopera=MERGE_OR_BROWSER\n")
    assert table["opera"].kind is EntityKind.MERGE_OR_BROWSER
    assert "redefined" in caplog.text


def test_missing_equal_sign_reports_line_number():
    with pytest.raises(KeywordTableError) as excinfo:
        loads("chrome=BROWSER\n# comment\nfirefox\n", source="keywords.txt")
    assert excinfo.value.line_number == 3
    assert "keywords.txt, line 3" in str(excinfo.value)


def test_unknown_entity_kind():
    with pytest.raises(KeywordTableError) as excinfo:
        loads("chrome=BROWSR\n")
    assert excinfo.value.line_number == 1
    assert "BROWSR" in str(excinfo.value)


def test_unknown_device_category():
    with pytest.raises(KeywordTableError) as excinfo:
        loads("\nipad=OS,PHABLET\n")
    assert excinfo.value.line_number == 2
    assert "PHABLET" in str(excinfo.value)


def test_empty_token():
    with pytest.raises(KeywordTableError):
        loads("=BROWSER\n")


def test_missing_resource(tmp_path):
    path = tmp_path / "missing.txt"
    with pytest.raises(KeywordTableError) as excinfo:
        load_keyword_table(path)
    assert excinfo.value.line_number is None
    assert str(path) in str(excinfo.value)


def test_load_from_file(tmp_path):
    path = tmp_path / "keywords.txt"
    path.write_text("chrome=BROWSER\nwindows=MERGE_OR_OS\n", encoding="utf-8")
    table = load_keyword_table(path)
    assert table.source == str(path)
    assert table.classify("Windows") == Classification(EntityKind.MERGE_OR_OS, None)


def test_table_is_read_only():
    table = loads("chrome=BROWSER\n")
    assert isinstance(table, KeywordTable)
    with pytest.raises(TypeError):
        table["firefox"] = Classification(EntityKind.BROWSER, None)
