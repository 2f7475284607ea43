"""Tests for remote error classification."""

import pytest

from src.chat.errors import ErrorKind, RemoteError, classify


@pytest.mark.parametrize(
    ("status", "body", "expected"),
    [
        (404, {}, ErrorKind.NOT_FOUND),
        (404, None, ErrorKind.NOT_FOUND),
        (400, {"description": "Chat not found"}, ErrorKind.NOT_FOUND),
        (422, {"detail": "Session does not exist"}, ErrorKind.NOT_FOUND),
        (400, {"description": "This chat has ended"}, ErrorKind.ENDED),
        (400, {"description": "CHAT HAS ENDED"}, ErrorKind.ENDED),
        (
            400,
            {"description": "Chat already exists with different configuration"},
            ErrorKind.CONFIG_CONFLICT,
        ),
        (500, {"description": "chat has ended"}, ErrorKind.OTHER),
        (400, {"description": "invalid payload"}, ErrorKind.OTHER),
        (401, {"description": "Unauthorized"}, ErrorKind.OTHER),
        (503, "Service Unavailable", ErrorKind.OTHER),
        (None, None, ErrorKind.OTHER),
    ],
)
def test_classify(status, body, expected) -> None:
    assert classify(status, body) is expected


def test_plain_text_body_is_matched() -> None:
    assert classify(400, "The chat has ended.") is ErrorKind.ENDED


def test_nested_error_message() -> None:
    body = {"error": {"message": "Chat already exists with different configuration"}}
    assert classify(400, body) is ErrorKind.CONFIG_CONFLICT


def test_description_takes_precedence() -> None:
    body = {"description": "chat has ended", "message": "not found"}
    assert classify(400, body) is ErrorKind.ENDED


def test_remote_error_from_response() -> None:
    err = RemoteError.from_response(400, {"description": "chat has ended"})
    assert err.kind is ErrorKind.ENDED
    assert err.status == 400
    assert err.detail == "chat has ended"


@pytest.mark.parametrize(
    ("err", "expected"),
    [
        (RemoteError(ErrorKind.CONFIG_CONFLICT, 400), True),
        (RemoteError(ErrorKind.OTHER, 409, "conflict"), True),
        (RemoteError(ErrorKind.OTHER, 400, "Chat Already Exists"), True),
        (RemoteError(ErrorKind.OTHER, 500, "already exists"), False),
        (RemoteError(ErrorKind.OTHER, None, "timeout"), False),
        (RemoteError(ErrorKind.NOT_FOUND, 404), False),
    ],
)
def test_already_exists(err, expected) -> None:
    assert err.already_exists is expected
