from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

import urllib3
from urllib3.util.retry import Retry

from .config import Site


DEFAULT_HEADERS = {
    "Accept": "text/html,*/*;q=0.8",
    "Accept-Encoding": "gzip, deflate",
}
CONNECT_TIMEOUT_S = 5.0
# retry_times counts failed fetches only; redirects have their own limit
MAX_REDIRECTS = 3


@dataclass(frozen=True)
class RequestOptions:
    """What a downloader needs from a Site, in urllib3 terms.

    Built once per Site. Nothing here sends a request; retries and the
    accept set are only carried along for the downloader to apply.
    """

    headers: Dict[str, str]
    timeout: urllib3.Timeout
    retries: Retry
    accept_status_codes: FrozenSet[int]
    charset: Optional[str] = None

    @classmethod
    def from_site(cls, site: Site) -> "RequestOptions":
        headers = dict(DEFAULT_HEADERS)
        headers.update(site.headers)
        if site.user_agent:
            headers["User-Agent"] = site.user_agent
        if site.cookies:
            headers["Cookie"] = "; ".join(f"{name}={value}" for name, value in site.cookies.items())
        read_s = site.time_out / 1000.0
        return cls(
            headers=headers,
            timeout=urllib3.Timeout(connect=min(CONNECT_TIMEOUT_S, read_s), read=read_s),
            retries=Retry(
                total=None,
                connect=site.retry_times,
                read=site.retry_times,
                redirect=MAX_REDIRECTS,
                backoff_factor=0.3,
                allowed_methods=["GET", "HEAD"],
                raise_on_status=False,
            ),
            accept_status_codes=site.accept_status_codes,
            charset=site.charset,
        )

    def pool_manager(self, num_pools: int = 8, maxsize: int = 16) -> urllib3.PoolManager:
        return urllib3.PoolManager(
            num_pools=num_pools,
            maxsize=maxsize,
            headers=self.headers,
            timeout=self.timeout,
            retries=self.retries,
        )
