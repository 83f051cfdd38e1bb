from __future__ import annotations

from import_cache.extractors import DottedModuleExtractor


def test_extracts_module_names_in_source_order() -> None:
    extractor = DottedModuleExtractor()
    text = "\n".join(
        [
            "module Main where",
            "import Foo.Bar",
            "import qualified Data.Map as M",
            "import Baz (baz, Qux)",
            "",
            "main = pure ()",
        ]
    )

    assert extractor.extract(text) == ["Foo.Bar", "Data.Map", "Baz"]


def test_requires_keyword_at_line_start_followed_by_whitespace() -> None:
    extractor = DottedModuleExtractor()
    text = "\n".join(
        [
            "  import Indented",
            "imports Plural",
            "-- import Commented",
            "import\tTabbed",
        ]
    )

    assert extractor.extract(text) == ["Tabbed"]


def test_line_without_uppercase_module_yields_nothing() -> None:
    extractor = DottedModuleExtractor()

    assert extractor.extract("import lowercase\nimport Upper\n") == ["Upper"]


def test_duplicates_are_kept() -> None:
    extractor = DottedModuleExtractor()

    assert extractor.extract("import A\nimport A\n") == ["A", "A"]


def test_module_token_keeps_underscores_and_digits() -> None:
    extractor = DottedModuleExtractor()

    assert extractor.extract("import Data.V2_Util.Core3 hiding (x)\n") == [
        "Data.V2_Util.Core3"
    ]


def test_candidate_path_replaces_dots_and_appends_extension() -> None:
    assert DottedModuleExtractor().candidate_path("Foo.Bar") == "Foo/Bar.hs"
    assert DottedModuleExtractor(extensions=(".lhs",)).candidate_path("Foo") == "Foo.lhs"


def test_custom_keyword() -> None:
    extractor = DottedModuleExtractor(extensions=(".mod",), keyword="use")

    assert extractor.extract("use Net.Http\nimport Ignored\n") == ["Net.Http"]


def test_supports_path_by_extension() -> None:
    extractor = DottedModuleExtractor()

    assert extractor.supports_path("src/Main.hs") is True
    assert extractor.supports_path("SRC/MAIN.HS") is True
    assert extractor.supports_path("src/main.cpp") is False


def test_lines_split_on_newline_only() -> None:
    extractor = DottedModuleExtractor()

    assert extractor.extract("import A\x0cimport B\n") == ["A"]
    assert extractor.extract("import Foo\r\nimport Bar\r\n") == ["Foo", "Bar"]
