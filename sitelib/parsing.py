from urllib.parse import urlparse

from .errors import InvalidUrlError


class UrlTools:
    @staticmethod
    def get_domain(url: str) -> str:
        """Return the network location of ``url``, lower-cased, port kept.

        Hosts are lower-cased so ``Example.com`` and ``example.com`` give the
        same domain. URLs without a scheme are read as ``http://`` URLs,
        protocol-relative ones (``//host/path``) as ``http:`` URLs.
        """
        if not url or not url.strip():
            raise InvalidUrlError(url, "empty url")
        url = url.strip()
        if url.startswith("//"):
            url = "http:" + url
        elif "://" not in url:
            url = "http://" + url
        netloc = urlparse(url).netloc
        # drop userinfo
        host = netloc.rsplit("@", 1)[-1].lower()
        if not host:
            raise InvalidUrlError(url)
        return host
