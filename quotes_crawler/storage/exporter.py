"""
JSON export of crawled categories.
"""

import json
import logging
from pathlib import Path

from ..crawler.models import CrawlDocument
from ..utils.config import OutputConfig


class ExportError(Exception):
    """Custom exception for export operations."""
    pass


class JSONExporter:
    """Serializes a crawl document and writes it to disk."""

    def __init__(self, config: OutputConfig):
        self.output_file = Path(config.file)
        self.indent = config.indent
        self.logger = logging.getLogger(__name__)

    def serialize(self, document: CrawlDocument) -> str:
        """Render the document as indented JSON."""
        return json.dumps(document.to_list(), ensure_ascii=False, indent=self.indent)

    def write(self, document: CrawlDocument) -> str:
        """
        Serialize ``document`` and write it to the output file.

        Returns:
            The serialized JSON text

        Raises:
            ExportError: the file could not be written
        """
        data = self.serialize(document)
        try:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.output_file, 'w', encoding='utf-8') as f:
                f.write(data)
        except OSError as e:
            raise ExportError(f"Failed to write {self.output_file}: {e}") from e

        self.logger.debug(f"Wrote {len(document.categories)} categories to {self.output_file}")
        return data
