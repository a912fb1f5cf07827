"""Pluggable page adapters, one per known FIS markup variant."""

from fidswatch.scrape.sources.base import Extraction, PageAdapter
from fidswatch.scrape.sources.html_table import HtmlTableAdapter
from fidswatch.scrape.sources.text_fallback import TextFallbackAdapter
from fidswatch.scrape.sources.xml_feed import XmlFeedAdapter

__all__ = ["Extraction", "HtmlTableAdapter", "PageAdapter", "TextFallbackAdapter", "XmlFeedAdapter"]
