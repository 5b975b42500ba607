import pytest

from models.enums import ClientKind
from services.client_classifier import ClientClassifier, classify, is_browser


CHROME = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FIREFOX = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"


@pytest.mark.parametrize("identity", [
    "curl/8.4.0",
    "Wget/1.21.4",
    "HTTPie/3.2.2",
    "python-requests/2.31.0",
    "Python-urllib/3.11",
    "python-httpx/0.25.0",
    "Go-http-client/1.1",
    "libwww-perl/6.72",
    "node-fetch/1.0 (+https://github.com/bitinn/node-fetch)",
])
def test_command_line_clients_stream(identity):
    assert classify(identity) is ClientKind.TERMINAL


@pytest.mark.parametrize("identity", [CHROME, FIREFOX, "Opera/9.80 (Windows NT 6.1)"])
def test_browsers_get_static_page(identity):
    assert classify(identity) is ClientKind.BROWSER
    assert is_browser(identity)


@pytest.mark.parametrize("identity", [None, "", "testclient", "SomeBot/1.0"])
def test_unknown_clients_stream(identity):
    assert classify(identity) is ClientKind.TERMINAL
    assert not is_browser(identity)


def test_terminal_match_wins_over_browser_signature():
    assert classify("Mozilla/5.0 compatible; curl/8.0") is ClientKind.TERMINAL


def test_match_is_case_insensitive():
    assert classify("CURL/7.0") is ClientKind.TERMINAL
    assert classify("mozilla/5.0") is ClientKind.BROWSER


def test_classifier_wrapper_delegates():
    classifier = ClientClassifier()
    assert classifier.classify(CHROME) is ClientKind.BROWSER
    assert classifier.is_browser("curl/8.0") is False
