from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Union

import pytest

from zentaokit.scraper import config, utils
from zentaokit.scraper.config import Credentials

BASE_URL = "http://zentao.example.com"
DATA_DIR = Path(__file__).resolve().parent / "data"


class FakeResponse:
    def __init__(
        self,
        text: str = "",
        *,
        status_code: int = 200,
        content: bytes | None = None,
        headers: Dict[str, str] | None = None,
    ) -> None:
        self.text = text
        self.status_code = status_code
        self.content = content if content is not None else text.encode("utf-8")
        self.headers = headers or {"content-type": "text/html; charset=utf-8"}


Route = Union[FakeResponse, BaseException]


class FakeSession:
    """Answers ``request()`` from a ``(method, url) -> response`` table.

    A route may be a list, consumed one entry per call. Unrouted requests
    answer 404.
    """

    def __init__(self, routes: Dict[Tuple[str, str], Union[Route, List[Route]]] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        route = self.routes.get((method, url), FakeResponse("not found", status_code=404))
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, BaseException):
            raise route
        return route

    def calls_to(self, url: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["url"] == url]


@pytest.fixture(autouse=True)
def _configure_temp_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    data_dir = tmp_path / "zentaokit"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "LOG_DIR", data_dir / "logs")
    monkeypatch.setattr(config, "LOG_FILE", data_dir / "logs" / "latest.log")
    monkeypatch.setattr(config, "SESSION_COOKIE_NAME", "zentaosid")
    monkeypatch.setattr(utils, "_LOGGER_INITIALISED", False)


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def read_fixture() -> Callable[[str], str]:
    """Return a reader for the recorded pages under ``tests/data``."""

    def _read(name: str) -> str:
        return (DATA_DIR / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def fake_session() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def credentials(base_url: str) -> Credentials:
    return Credentials(
        base_url=base_url + "/",
        session_id="sid123",
        username="zhangsan",
        password="s3cret",
    )
