#!/usr/bin/env python3
"""
Main entry point for the quotes crawler.
"""

import asyncio
import argparse
import logging
import sys
from typing import Optional

from quotes_crawler import __version__
from quotes_crawler.crawler.scheduler import CrawlerScheduler, DiscoveryError
from quotes_crawler.storage.exporter import JSONExporter, ExportError
from quotes_crawler.utils.config import load_config, Config
from quotes_crawler.utils.logger import setup_logging


class CrawlerApp:
    """Main application class for the quotes crawler."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def crawl(self, config: Config) -> int:
        """Crawl, export and report. Returns the process exit code."""
        self.logger.info(f"Crawling categories from {config.crawler.index_url}")

        try:
            async with CrawlerScheduler(config) as scheduler:
                document = await scheduler.run()
                stats = scheduler.get_stats()
        except DiscoveryError as e:
            self.logger.critical(str(e))
            return 1

        exporter = JSONExporter(config.output)
        try:
            data = exporter.write(document)
        except ExportError as e:
            self.logger.error(str(e))
            return 1

        if config.output.print_stdout:
            print(data)

        if stats['categories_failed'] or stats['pages_failed']:
            self.logger.warning(
                f"{stats['categories_failed']} categories and "
                f"{stats['pages_failed']} pages could not be fetched"
            )
        self.logger.info(
            f"Scraped {document.total_pages} pages ({document.total_quotes} quotes) "
            f"in {document.elapsed_time:.2f}s"
        )
        return 0

    def run(self, config_path: Optional[str] = None, output: Optional[str] = None,
            print_stdout: bool = True) -> int:
        """Load configuration, set up logging and run the crawl."""
        try:
            config = load_config(config_path)
        except (FileNotFoundError, ValueError, TypeError) as e:
            print(f"Error: invalid configuration: {e}", file=sys.stderr)
            return 1

        if output:
            config.output.file = output
        if not print_stdout:
            config.output.print_stdout = False

        setup_logging(config.logging)
        return asyncio.run(self.crawl(config))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Quotes Crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                           # Crawl with built-in defaults
  python main.py --config crawler.yaml     # Override settings from a YAML file
  python main.py --output quotes.json      # Write to another file
  python main.py --no-print                # Do not echo the JSON to stdout
        """
    )

    parser.add_argument(
        '--config',
        help='Path to an optional YAML configuration file'
    )

    parser.add_argument(
        '--output',
        help='Output JSON file (default: data.json)'
    )

    parser.add_argument(
        '--no-print',
        action='store_true',
        help='Do not print the JSON document to stdout'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Quotes Crawler {__version__}'
    )

    args = parser.parse_args()

    app = CrawlerApp()
    try:
        return app.run(
            config_path=args.config,
            output=args.output,
            print_stdout=not args.no_print
        )
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
