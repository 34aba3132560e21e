import io
import logging

import pytest

from wallpack.framework.errors import ManifestError
from wallpack.framework.manifest import group_by_artist, parse_manifest, read_manifest_file, sorted_selections


def _parse(text: str, **kwargs):
    return parse_manifest(io.BytesIO(text.encode("utf-8")), **kwargs)


def test_parse_skips_comments_blanks_and_malformed_lines(caplog):
    with caplog.at_level(logging.WARNING, logger="wallpack.framework.manifest"):
        result = _parse("a:1\n#comment\n\nb:2\nbad-line\nc:x\n")

    assert result == [("a", 1), ("b", 2)]
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "bad-line" in warnings[0].getMessage()
    assert "`x`" in warnings[1].getMessage()


def test_parse_trims_lines_and_keeps_duplicates_in_file_order():
    assert _parse("  zed:4  \n\talpha:0\nzed:4\n") == [("zed", 4), ("alpha", 0), ("zed", 4)]


def test_parse_splits_on_first_colon_only():
    # `a:b:3` leaves `b:3` as the value, which is not a number
    assert _parse("a:b:3\nok:7\n") == [("ok", 7)]


@pytest.mark.parametrize("line", [":3", "a:", "a:-1", "a: 1", "a:1.5", "a:+", "a:++1", "a:١"])
def test_parse_rejects_non_unsigned_values_and_empty_names(line):
    assert _parse(line + "\n") == []


def test_parse_output_count_matches_well_formed_lines():
    lines = ["a:1", "# c", "", "b:x", "c:3", "noseparator", "d:40"]
    assert len(_parse("\n".join(lines))) == 3


def test_parse_uses_given_logger():
    messages: list[str] = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            messages.append(record.getMessage())

    logger = logging.getLogger("test.manifest.custom")
    logger.addHandler(ListHandler())
    logger.propagate = False

    _parse("broken\n", logger=logger)
    assert messages and "broken" in messages[0]


def test_parse_invalid_utf8_is_fatal():
    with pytest.raises(ManifestError):
        parse_manifest(io.BytesIO(b"a:1\n\xff\xfe:2\n"))


def test_read_manifest_file_missing(tmp_path):
    with pytest.raises(ManifestError):
        read_manifest_file(str(tmp_path / "nope"))


def test_group_by_artist_merges_contiguous_runs():
    assert group_by_artist([("a", 1), ("a", 2), ("b", 1)]) == [("a", {1, 2}), ("b", {1})]


def test_group_by_artist_collapses_duplicate_indices():
    assert group_by_artist([("a", 1), ("a", 1)]) == [("a", {1})]


def test_group_by_artist_splits_non_contiguous_runs(caplog):
    with caplog.at_level(logging.WARNING, logger="wallpack.framework.manifest"):
        groups = group_by_artist([("a", 1), ("b", 2), ("a", 3)])

    assert groups == [("a", {1}), ("b", {2}), ("a", {3})]
    assert any("non-contiguous" in r.getMessage() for r in caplog.records)


def test_group_by_artist_empty_input():
    assert group_by_artist([]) == []


def test_sorted_selections_makes_artists_contiguous():
    selections = sorted_selections([("b", 1), ("a", 2), ("b", 0), ("a", 1)])
    assert group_by_artist(selections) == [("a", {1, 2}), ("b", {0, 1})]


def test_parse_accepts_leading_plus_sign():
    assert _parse("a:+1\nb:+07\n") == [("a", 1), ("b", 7)]
