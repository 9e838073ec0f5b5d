"""
Output layer for the quotes crawler.
"""

from .exporter import JSONExporter, ExportError

__all__ = ['JSONExporter', 'ExportError']
