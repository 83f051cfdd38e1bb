from __future__ import annotations

import pytest

from import_cache.imports import parse_paths, serialize_paths, unique_paths


def test_serialize_writes_one_path_per_line_with_trailing_newline() -> None:
    assert serialize_paths(["src/A.hs", "src/B.hs"]) == "src/A.hs\nsrc/B.hs\n"


def test_empty_list_serializes_to_empty_file() -> None:
    assert serialize_paths([]) == ""
    assert parse_paths("") == []


def test_entries_with_newlines_are_rejected() -> None:
    with pytest.raises(ValueError, match="newlines"):
        serialize_paths(["ok.h", "bad\nname.h"])


def test_parse_treats_non_empty_lines_as_literal_paths() -> None:
    assert parse_paths("a.h\n\n  spaced.h\nb.h") == ["a.h", "  spaced.h", "b.h"]


def test_unique_paths_keeps_first_occurrence_and_drops_excluded() -> None:
    assert unique_paths(["b", "a", "b", "self", "c", "a"], exclude="self") == ["b", "a", "c"]
