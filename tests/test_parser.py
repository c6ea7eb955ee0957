import logging

import pytest

from sgfedit.common.typed_config import TypedConfigReader
from sgfedit.core.bigfloat import Bigfloat
from sgfedit.core.errors import SgfParseError
from sgfedit.core.game_node import Collection
from sgfedit.core.properties import Property
from sgfedit.core.sgf_parser import detect_encoding, parse, parse_file
from sgfedit.core.sgf_types import Color, CoordList

from tests.sgf_helpers import parse_one


def test_simple():
    root = parse_one("(;SZ[9];B[ab];W[cd])")
    assert root.properties == (Property("SZ", (9, 9)),)
    first = root.children[0]
    assert first.properties == (Property("B", (0, 1)),)
    second = first.children[0]
    assert second.properties == (Property("W", (2, 3)),)
    assert second.children == ()


def test_typed_values():
    root = parse_one("(;GM[1]FF[4]SZ[19]KM[6.5]PB[Lee]AB[dd][pp]PL[W]C[hello])")
    assert root.get_value("FF") == 4
    assert root.get_value("KM") == Bigfloat.encode(65, -1)
    assert root.get_value("PB") == "Lee"
    assert root.get_value("AB") == CoordList.of((3, 3), (15, 15))
    assert root.get_value("PL") is Color.WHITE
    assert root.get_value("C") == "hello"


def test_branch():
    root = parse_one("(;SZ[19](;B[aa];W[bb])(;B[cc]))")
    assert len(root.children) == 2
    assert root.children[0].get_value("B") == (0, 0)
    assert root.children[0].children[0].get_value("W") == (1, 1)
    assert root.children[1].get_value("B") == (2, 2)


def test_subtrees_hang_off_last_node_of_sequence():
    root = parse_one("(;SZ[9];B[aa];W[bb](;B[cc])(;B[dd]))")
    last = root.children[0].children[0]
    assert last.get_value("W") == (1, 1)
    assert [child.get_value("B") for child in last.children] == [(2, 2), (3, 3)]


def test_whitespace_everywhere():
    text = "\n ( \n ; SZ \n [9] \n C [a] \n ; \n B [ab] \n ( ; W[cc] ) ( ;W[dd] ) \n ) \n"
    root = parse_one(text)
    assert root.get_value("C") == "a"
    assert len(root.children[0].children) == 2


def test_unknown_property_kept():
    root = parse_one("(;SZ[9]XX[one][two])")
    assert root.get_value("XX") == ("one", "two")


def test_empty_collection():
    assert parse("") == Collection()
    assert parse("  \n ") == Collection()


def test_multiple_trees():
    collection = parse("(;SZ[9])(;SZ[13])")
    assert [root.get_value("SZ") for root in collection] == [(9, 9), (13, 13)]


def test_tt_is_pass_on_19x19():
    root = parse_one("(;SZ[19];B[tt];W[tt])")
    assert root.children[0].get_value("B") is None
    assert root.children[0].has_property("B")
    assert root.children[0].children[0].get_value("W") is None


def test_tt_is_pass_on_small_boards():
    root = parse_one("(;SZ[9](;B[tt])(;W[aa]))")
    assert root.children[0].get_value("B") is None
    assert root.children[1].get_value("W") == (0, 0)


def test_tt_kept_on_large_boards():
    root = parse_one("(;SZ[25];B[tt])")
    assert root.children[0].get_value("B") == (19, 19)


def test_tt_kept_on_rectangular_board_with_large_side():
    root = parse_one("(;SZ[19:21];B[tt])")
    assert root.children[0].get_value("B") == (19, 19)


def test_pass_normalization_limit_from_config():
    config = TypedConfigReader({"board": {"pass_normalization_max": 9}})
    root = parse("(;SZ[19];B[tt])", config)[0]
    assert root.children[0].get_value("B") == (19, 19)


def test_tt_not_rewritten_in_setup_properties():
    root = parse_one("(;SZ[19]AB[tt])")
    assert root.get_value("AB") == CoordList.of((19, 19))


def test_pass_normalization_keeps_variation_order():
    root = parse_one("(;SZ[9](;B[aa])(;B[tt];W[tt])(;B[cc]))")
    assert [child.get_value("B") for child in root.children] == [(0, 0), None, (2, 2)]
    assert root.children[1].children[0].get_value("W") is None


def test_long_game_on_19x19_does_not_recurse():
    moves = "".join(
        f";{'BW'[i % 2]}[{chr(ord('a') + i % 19)}{chr(ord('a') + i // 19 % 19)}]" for i in range(5000)
    )
    root = parse_one(f"(;SZ[19]{moves};B[tt])")
    depth = 0
    node = root
    while node.children:
        node = node.children[0]
        depth += 1
    assert depth == 5001
    assert node.get_value("B") is None
    assert node.has_property("B")


def test_missing_size_is_an_error():
    with pytest.raises(SgfParseError) as exc_info:
        parse("(;B[ab])")
    assert len(exc_info.value.errors) == 1
    assert "SZ" in exc_info.value.errors[0]
    assert str(exc_info.value).startswith("The following errors occurred while parsing:\n-> ")


def test_errors_from_all_trees_are_aggregated():
    with pytest.raises(SgfParseError) as exc_info:
        parse("(;B[ab])(;SZ[9])(;W[cd])")
    errors = exc_info.value.errors
    assert len(errors) == 2
    assert "game tree 1" in errors[0]
    assert "game tree 3" in errors[1]
    assert str(exc_info.value).count("\n-> ") == 2


def test_one_bad_tree_fails_the_collection():
    with pytest.raises(SgfParseError):
        parse("(;SZ[9])(;B[ab])")


@pytest.mark.parametrize(
    "text, expectation",
    [
        ("(;SZ[9]", "node, game tree or ')'"),
        ("(SZ[9])", "node"),
        ("x", "game tree or end of input"),
        ("(;SZ[9]B[ab)", "move (point or pass)"),
        ("(;SZ[9:9])", "board size (width or width:height)"),
        ("(;SZ[9]PL[X])", "color"),
    ],
)
def test_syntax_errors(text, expectation):
    with pytest.raises(SgfParseError) as exc_info:
        parse(text)
    assert len(exc_info.value.errors) == 1
    assert f"expected {expectation}" in exc_info.value.errors[0]


def test_syntax_error_location():
    with pytest.raises(SgfParseError) as exc_info:
        parse("(;SZ[9]\n;B[a!])")
    assert exc_info.value.errors[0].startswith("line 2, column 5:")
    assert exc_info.value.context["line"] == 2


def test_single_valued_property_rejects_extra_values():
    with pytest.raises(SgfParseError):
        parse("(;SZ[9][13])")


def test_lowercase_property_names_rejected():
    with pytest.raises(SgfParseError):
        parse("(;SZ[9]Comment[x])")


def test_duplicate_properties_kept_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="sgfedit.core.sgf_parser"):
        root = parse_one("(;SZ[9]C[a]C[b])")
    assert [p.value for p in root.properties if p.name == "C"] == ["a", "b"]
    assert "Duplicate property C" in caplog.text


class TestParseFile:
    def test_utf8_with_ca(self, tmp_path):
        path = tmp_path / "game.sgf"
        path.write_bytes("(;CA[UTF-8]SZ[9]PB[李昌镐])".encode("utf-8"))
        root = parse_file(str(path))[0]
        assert root.get_value("PB") == "李昌镐"

    def test_ca_declares_other_encoding(self, tmp_path):
        path = tmp_path / "game.sgf"
        path.write_bytes("(;CA[ISO-8859-1]SZ[9]PB[José])".encode("latin-1"))
        assert parse_file(str(path))[0].get_value("PB") == "José"

    def test_explicit_encoding_wins(self, tmp_path):
        path = tmp_path / "game.sgf"
        path.write_bytes("(;SZ[9]PW[Zoë])".encode("latin-1"))
        assert parse_file(str(path), encoding="latin-1")[0].get_value("PW") == "Zoë"

    def test_unknown_encoding_falls_back(self, tmp_path):
        path = tmp_path / "game.sgf"
        path.write_bytes(b"(;CA[no-such-codec]SZ[9]PB[Lee])")
        assert parse_file(str(path))[0].get_value("PB") == "Lee"

    def test_detect_encoding_from_ca(self):
        assert detect_encoding(b"(;CA[GB2312]SZ[19])") == "GB2312"

    def test_detect_encoding_default_when_detection_disabled(self):
        config = TypedConfigReader({"files": {"detect_encoding": False, "default_encoding": "latin-1"}})
        assert detect_encoding(b"(;SZ[19])", config) == "latin-1"

    def test_detect_encoding_uses_chardet(self, monkeypatch):
        import sgfedit.core.sgf_parser as sgf_parser

        monkeypatch.setattr(sgf_parser.chardet, "detect", lambda data: {"encoding": "GB2312"})
        assert detect_encoding(b"(;SZ[19])") == "GBK"

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            parse_file(str(tmp_path / "missing.sgf"))
