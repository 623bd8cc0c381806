"""Tests for the location identifier codec."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from puntada.errors import InvalidIdentifier
from puntada.identifier import EditId, decode, encode


class TestEncode:
    def test_colon_join(self) -> None:
        assert encode("src/App.tsx", 3, 5) == "src/App.tsx:3:5"

    def test_str_of_edit_id(self) -> None:
        assert str(EditId("a.tsx", 1, 2)) == "a.tsx:1:2"


class TestDecode:
    def test_simple(self) -> None:
        assert decode("src/App.tsx:3:5") == EditId("src/App.tsx", 3, 5)

    def test_path_with_colons(self) -> None:
        assert decode("src/a:b.tsx:12:40") == ("src/a:b.tsx", 12, 40)

    @pytest.mark.parametrize(
        "identifier",
        [
            "",
            "a.tsx",
            "a.tsx:3",
            ":3:5",
            "a.tsx:x:5",
            "a.tsx:3:",
            "a.tsx:0:5",
            "a.tsx:3:0",
            "a.tsx:+3:5",
            "a.tsx:-3:5",
            "a.tsx: 3:5",
            "a.tsx:3_0:5",
            "a.tsx:\u0663:5",
        ],
    )
    def test_rejects(self, identifier: str) -> None:
        with pytest.raises(InvalidIdentifier) as exc_info:
            decode(identifier)
        assert exc_info.value.identifier == identifier
        assert exc_info.value.status == 400

    def test_rejects_non_string(self) -> None:
        with pytest.raises(InvalidIdentifier):
            decode(42)  # type: ignore[arg-type]


class TestRoundTrip:
    @given(
        path=st.text(min_size=1),
        line=st.integers(min_value=1, max_value=10**9),
        column=st.integers(min_value=1, max_value=10**9),
    )
    def test_decode_inverts_encode(self, path: str, line: int, column: int) -> None:
        assert decode(encode(path, line, column)) == (path, line, column)
