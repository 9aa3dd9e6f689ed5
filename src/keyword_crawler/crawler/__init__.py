"""Crawl engine components."""

from .domain import DomainCrawler
from .extractor import ContentExtractor, ExtractedContent, MetaDateExtractor
from .fetcher import PageFetcher
from .links import DiscoveredLinks, LinkDiscoverer, PaginationClassifier
from .matcher import KeywordMatcher
from .orchestrator import CrawlOrchestrator

__all__ = [
    "CrawlOrchestrator",
    "DomainCrawler",
    "PageFetcher",
    "ContentExtractor",
    "ExtractedContent",
    "MetaDateExtractor",
    "LinkDiscoverer",
    "DiscoveredLinks",
    "PaginationClassifier",
    "KeywordMatcher",
]
