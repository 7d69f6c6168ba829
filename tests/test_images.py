import base64

import pytest
import requests

from zentaokit.scraper import images
from zentaokit.scraper.images import convert_image_to_data_url, image_placeholder, process_images

PNG = b"\x89PNG\r\n\x1a\nfake"
HTTP_IMAGE = "http://zentao.example.com/file-read-11.png"


@pytest.fixture
def png_response(fake_response):
    return fake_response(content=PNG, headers={"content-type": "image/png"})


def test_http_image_is_inlined_with_session_cookie(credentials, fake_session, png_response):
    session = fake_session({("GET", HTTP_IMAGE): png_response})

    result = convert_image_to_data_url(HTTP_IMAGE, session=session, credentials=credentials)

    assert result == "data:image/png;base64," + base64.b64encode(PNG).decode("ascii")
    (call,) = session.calls
    assert "zentaosid=sid123" in call["headers"]["Cookie"]
    assert call["headers"]["Accept"].startswith("image/")


def test_content_type_parameters_are_dropped(credentials, fake_session, fake_response):
    session = fake_session(
        {("GET", HTTP_IMAGE): fake_response(content=PNG, headers={"content-type": "image/jpeg; charset=binary"})}
    )

    result = convert_image_to_data_url(HTTP_IMAGE, session=session, credentials=credentials)

    assert result.startswith("data:image/jpeg;base64,")


@pytest.mark.parametrize(
    "failure",
    [
        {"text": "gone", "status_code": 404},
        {"text": "<html>login</html>", "headers": {"content-type": "text/html"}},
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
    ],
)
def test_failed_image_becomes_placeholder(credentials, monkeypatch, fake_session, fake_response, failure):
    messages = []
    monkeypatch.setattr(images, "log_line", lambda msg: messages.append(msg))
    route = fake_response(**failure) if isinstance(failure, dict) else failure
    session = fake_session({("GET", HTTP_IMAGE): route})

    result = convert_image_to_data_url(HTTP_IMAGE, session=session, credentials=credentials)

    assert result == f"[📷 图片链接]({HTTP_IMAGE})"
    assert result == image_placeholder(HTTP_IMAGE)
    assert messages


def test_process_images_keeps_order_and_isolates_failures(credentials, fake_session, fake_response, png_response):
    broken = "http://zentao.example.com/file-read-12.png"
    secure = "https://cdn.example.com/expected.png"
    session = fake_session(
        {
            ("GET", HTTP_IMAGE): png_response,
            ("GET", broken): fake_response("oops", status_code=500),
        }
    )

    result = process_images([HTTP_IMAGE, secure, broken], session=session, credentials=credentials)

    assert len(result) == 3
    assert result[0].startswith("data:image/png;base64,")
    assert result[1] == secure
    assert result[2] == image_placeholder(broken)
    assert {call["url"] for call in session.calls} == {HTTP_IMAGE, broken}


def test_secure_images_are_not_fetched(credentials, fake_session):
    session = fake_session()
    urls = ["https://cdn.example.com/a.png", "https://cdn.example.com/b.png"]

    assert process_images(urls, session=session, credentials=credentials) == urls
    assert session.calls == []


def test_process_images_empty(credentials, fake_session):
    assert process_images([], session=fake_session(), credentials=credentials) == []
