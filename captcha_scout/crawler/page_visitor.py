# captcha_scout/crawler/page_visitor.py
"""
Page visitor: fetch one page, run every detector over it, collect auth links.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, MutableSet

from captcha_scout.aggregator import annotate_enterprise, dedupe_page
from captcha_scout.config import ScoutConfig
from captcha_scout.crawler.fetcher import Fetcher
from captcha_scout.crawler.link_extractor import extract_auth_links, resolve
from captcha_scout.crawler.models import PageVisit
from captcha_scout.crawler.script_fetcher import ExternalScriptFetcher
from captcha_scout.detect import element_scanner
from captcha_scout.detect.extractor import extract
from captcha_scout.detect.models import CaptchaRecord, Location
from captcha_scout.parser.html_parser import ScriptNode, parse_html
from captcha_scout.utils import origin_of


class PageVisitor:
    """Visits single pages on behalf of :class:`~captcha_scout.crawler.crawler.AsyncCrawler`."""

    def __init__(self, fetcher: Fetcher, config: ScoutConfig) -> None:
        self.fetcher = fetcher
        self.config = config
        self.scripts = ExternalScriptFetcher(fetcher)
        self.logger = logging.getLogger("CaptchaScout")

    async def visit(self, base_url: str, path: str, visited: MutableSet[str]) -> PageVisit:
        """
        Visit ``path`` resolved against ``base_url``.

        Already visited or unusable URLs return an empty :class:`PageVisit`
        without any I/O.  The URL is added to *visited* before the fetch.
        """
        url = resolve(path, base_url)
        if url is None:
            self.logger.debug("Skipping unusable link %r", path)
            return PageVisit(url=path)
        if url in visited:
            return PageVisit(url=url)
        visited.add(url)

        result = await self.fetcher.fetch(url)
        if not result.ok:
            self.logger.warning("Error crawling %s: %s", url, result.error)
            return PageVisit(url=url)

        page = parse_html(result.page())
        script_batches = await asyncio.gather(*(self._scan_script(node, url) for node in page.scripts))
        records: List[CaptchaRecord] = [r for batch in script_batches for r in batch]
        records.extend(element_scanner.scan(page, found_on=url))
        records.extend(element_scanner.scan_url_parameters(page, found_on=url))
        records = dedupe_page(annotate_enterprise(records, page.html, self.config.enterprise_markers))

        # relative links stay on the requested origin even when the page redirected away
        links = extract_auth_links(page.anchors, url, origin_of(base_url), self.config.auth_terms)
        self.logger.info("Visited %s: %d record(s), %d auth link(s)", url, len(records), len(links))
        return PageVisit(url=url, records=records, links=links, fetched=True)

    async def _scan_script(self, node: ScriptNode, page_url: str) -> List[CaptchaRecord]:
        records = [d.to_record(Location.SCRIPT_CONTENT, page_url) for d in extract(node.inline)]
        if not node.src:
            return records
        records.extend(d.to_record(Location.SCRIPT_SOURCE, page_url) for d in extract(node.src))

        fetched = await self.scripts.maybe_fetch(node.src)
        if fetched is None:
            return records
        if not fetched.ok:
            # a broken script never fails the page
            self.logger.debug("External script %s skipped: %s", node.src, fetched.error)
            return records
        records.extend(d.to_record(Location.EXTERNAL_SCRIPT, page_url) for d in extract(fetched.content))
        return records
