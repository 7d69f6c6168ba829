import pytest

from zentaokit.scraper.session import is_session_expired, login_redirect_target


def test_login_redirect_page_is_expired(read_fixture):
    html = read_fixture("login-redirect.html")

    assert is_session_expired(html) is True
    assert login_redirect_target(html) == "/user-login-L215LXdvcmstdGFzay5odG1s.html"


@pytest.mark.parametrize(
    "name",
    ["my-task.html", "my-bug.html", "task-view.html", "bug-view.html", "task-finish-success.html"],
)
def test_regular_pages_are_not_expired(read_fixture, name):
    assert is_session_expired(read_fixture(name)) is False


@pytest.mark.parametrize(
    ("html", "expired"),
    [
        ('<script>self.location="/user-login.html";</script>', True),
        ("<script>self.location='/zentao/user-login-abc.html'</script>", True),
        ("<script>self.location = '/my.html';</script>", False),
        ("<p>Please visit user-login to continue</p>", False),
        ("", False),
    ],
)
def test_redirect_script_variants(html, expired):
    assert is_session_expired(html) is expired
