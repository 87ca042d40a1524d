import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest
import urllib3

from sitelib.config import Site
from sitelib.net import DEFAULT_HEADERS, MAX_REDIRECTS, RequestOptions


def test_options_from_site():
    site = (
        Site.me()
        .add_start_url("https://example.com/a")
        .set_user_agent("bot/1.0")
        .add_header("Referer", "https://example.com/")
        .add_cookie("sid", "1")
        .add_cookie("lang", "en")
        .set_time_out(5000)
        .set_retry_times(3)
        .set_charset("gbk")
        .set_accept_status_codes({200, 304})
    )
    opts = RequestOptions.from_site(site)
    assert opts.headers["User-Agent"] == "bot/1.0"
    assert opts.headers["Referer"] == "https://example.com/"
    assert opts.headers["Cookie"] == "sid=1; lang=en"
    assert opts.headers["Accept"] == DEFAULT_HEADERS["Accept"]
    assert opts.timeout.read_timeout == 5.0
    assert opts.timeout.connect_timeout == 5.0
    assert opts.retries.connect == 3
    assert opts.retries.read == 3
    assert opts.retries.redirect == MAX_REDIRECTS
    assert opts.charset == "gbk"
    assert opts.accept_status_codes == {200, 304}
    assert site.is_accepted(304)


def test_defaults_leave_optional_headers_out():
    opts = RequestOptions.from_site(Site.me().set_domain("example.com"))
    assert "User-Agent" not in opts.headers
    assert "Cookie" not in opts.headers
    assert opts.timeout.read_timeout == 2.0
    assert opts.retries.connect == 0
    assert opts.retries.read == 0
    assert opts.accept_status_codes == {200}


def test_site_headers_override_defaults():
    opts = RequestOptions.from_site(Site.me().add_header("Accept", "application/json"))
    assert opts.headers["Accept"] == "application/json"


def test_options_do_not_alias_site_headers():
    site = Site.me().add_header("X", "1")
    opts = RequestOptions.from_site(site)
    site.add_header("Y", "2")
    assert "Y" not in opts.headers


def test_non_positive_timeout_rejected_by_urllib3():
    with pytest.raises(ValueError):
        RequestOptions.from_site(Site.me().set_time_out(0))


def test_pool_manager_uses_options():
    opts = RequestOptions.from_site(Site.me().set_user_agent("bot/1.0").set_time_out(1000))
    pm = opts.pool_manager()
    assert isinstance(pm, urllib3.PoolManager)
    assert pm.headers["User-Agent"] == "bot/1.0"
    assert pm.connection_pool_kw["timeout"] is opts.timeout
    assert pm.connection_pool_kw["retries"] is opts.retries
    pm.clear()


class RedirectHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path == "/old":
            self.send_response(301)
            self.send_header("Location", "/new")
            self.send_header("Content-Length", "0")
            self.end_headers()
            return
        body = b"<html><head><title>New</title></head></html>"
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def redirect_server():
    server = HTTPServer(("127.0.0.1", 0), RedirectHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def test_redirects_followed_without_retries(redirect_server):
    opts = RequestOptions.from_site(Site.me().add_start_url(redirect_server + "/old"))
    assert opts.retries.connect == 0
    pm = opts.pool_manager()
    response = pm.request("GET", redirect_server + "/old")
    assert response.status == 200
    assert b"New" in response.data
    pm.clear()
