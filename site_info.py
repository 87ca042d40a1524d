#!/usr/bin/env python3
import argparse
import json
import logging
from typing import List, Optional, Tuple

from sitelib.config import DEFAULT_SLEEP_TIME, DEFAULT_TIME_OUT, HeaderConst, Site


def _pair(text: str) -> Tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return key, value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a crawl site configuration and print it as JSON.")
    parser.add_argument("--start", nargs="+", required=True, help="One or more start URLs.")
    parser.add_argument("--domain", default=None, help="Site domain. Defaults to the host of the first --start URL.")
    parser.add_argument("--user-agent", default=None, help="User-Agent header to send.")
    parser.add_argument("--charset", default=None, help="Page charset. Detected from responses when omitted.")
    parser.add_argument("--cookie", dest="cookies", type=_pair, action="append", default=[], help="NAME=VALUE, repeatable.")
    parser.add_argument("--header", dest="headers", type=_pair, action="append", default=[], help="KEY=VALUE, repeatable.")
    parser.add_argument("--referer", default=None, help="Shortcut for --header Referer=URL.")
    parser.add_argument("--sleep-time", type=int, default=DEFAULT_SLEEP_TIME, help="Milliseconds between two pages.")
    parser.add_argument("--retry-times", type=int, default=0, help="Immediate retries when a download fails.")
    parser.add_argument("--cycle-retry-times", type=int, default=0, help="Times a failed URL goes back to the scheduler.")
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIME_OUT, help="Download timeout in milliseconds.")
    parser.add_argument("--accept-status", type=int, nargs="+", default=None, help="Status codes treated as success.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    return parser.parse_args(argv)


def build_site(args: argparse.Namespace) -> Site:
    site = Site.me()
    if args.domain:
        site.set_domain(args.domain)
    site.add_start_urls(*args.start)
    site.set_user_agent(args.user_agent).set_charset(args.charset)
    for name, value in args.cookies:
        site.add_cookie(name, value)
    for key, value in args.headers:
        site.add_header(key, value)
    if args.referer:
        site.add_header(HeaderConst.REFERER, args.referer)
    site.set_sleep_time(args.sleep_time).set_retry_times(args.retry_times).set_cycle_retry_times(
        args.cycle_retry_times
    ).set_time_out(args.timeout)
    if args.accept_status:
        site.set_accept_status_codes(args.accept_status)
    return site


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )

    site = build_site(args)
    task = site.to_task()
    logging.info("Built site %s with %d start URLs", task.get_uuid(), len(site.start_urls))
    print(json.dumps({"uuid": task.get_uuid(), "site": site.to_dict()}, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
