"""Tests for smarttag.core.result module."""

import pytest

from smarttag.core.result import Err, Ok, Result, is_err, is_ok


def test_ok() -> None:
    result = Ok(42)
    assert result.is_ok() is True
    assert result.is_err() is False
    assert result.unwrap_or(0) == 42


def test_err() -> None:
    result = Err("boom")
    assert result.is_ok() is False
    assert result.is_err() is True
    assert result.unwrap_or(7) == 7


def test_values_are_frozen() -> None:
    result = Ok(42)
    with pytest.raises(AttributeError):
        result.value = 0  # type: ignore[misc]


def test_equality() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert Err("x") == Err("x")


@pytest.mark.parametrize(("result", "expected"), [(Ok(1), "ok:1"), (Err("nope"), "err:nope")])
def test_match(result: Result[int, str], expected: str) -> None:
    match result:
        case Ok(value):
            seen = f"ok:{value}"
        case Err(error):
            seen = f"err:{error}"
    assert seen == expected


def test_type_guards() -> None:
    ok: Result[int, str] = Ok(1)
    err: Result[int, str] = Err("x")
    assert is_ok(ok) and not is_err(ok)
    assert is_err(err) and not is_ok(err)
