"""site_sweep.crawler: level-synchronous crawl engine, page fetcher and link extractor."""
