import pytest

from binstream.core.models.status import Result, ResultError, Status, StatusCode


@pytest.mark.ut
def test_only_success_is_success():
    for code in StatusCode:
        assert Status(code).is_success() == (code is StatusCode.SUCCESS)
        assert bool(Status(code)) == (code is StatusCode.SUCCESS)


@pytest.mark.ut
def test_status_codes_are_stable():
    assert len(StatusCode) == 17
    assert StatusCode.FAILED_PRECONDITION == 9
    assert StatusCode.OUT_OF_RANGE == 11
    assert StatusCode.UNAUTHENTICATED == 16


@pytest.mark.ut
@pytest.mark.parametrize("raw", [17, 42, -1, 2**32])
def test_unknown_raw_code_normalizes_to_unknown(raw):
    assert StatusCode.from_value(raw) is StatusCode.UNKNOWN
    assert Status(raw).code is StatusCode.UNKNOWN


@pytest.mark.ut
def test_known_raw_code_is_preserved():
    assert StatusCode.from_value(10) is StatusCode.ABORTED
    assert Status(11).code is StatusCode.OUT_OF_RANGE


@pytest.mark.ut
def test_equality_ignores_message():
    assert Status.out_of_range("EOF reached.") == Status(StatusCode.OUT_OF_RANGE)
    assert Status.aborted("x") != Status.out_of_range("x")


@pytest.mark.ut
def test_status_is_immutable():
    status = Status.ok()
    with pytest.raises(AttributeError):
        status.code = StatusCode.ABORTED  # type: ignore[misc]


@pytest.mark.ut
def test_str_uses_label_and_message():
    assert str(Status.ok()) == "Success"
    assert str(Status.out_of_range("EOF reached.")) == "Out of Range: EOF reached."
    assert StatusCode.FAILED_PRECONDITION.label == "Failed Precondition"


@pytest.mark.ut
def test_result_success_exposes_value():
    result = Result.success(7)
    assert result.ok
    assert result
    assert result.value == 7
    assert result.unwrap() == 7


@pytest.mark.ut
def test_result_failure_hides_value():
    result = Result.failure(Status.aborted("boom"))
    assert not result
    assert result.status.code is StatusCode.ABORTED
    assert result.value_or(3) == 3

    with pytest.raises(ResultError) as info:
        _ = result.value
    assert info.value.status == Status(StatusCode.ABORTED)


@pytest.mark.ut
def test_result_failure_rejects_success_status():
    with pytest.raises(ValueError):
        Result.failure(Status.ok())


@pytest.mark.ut
def test_falsy_success_value_is_still_success():
    result = Result.success(b"")
    assert result.ok
    assert result.value == b""
