"""
Exporters package - JSON export of resolved addresses
"""

from src.exporters.json_exporter import JSONExporter

__all__ = ['JSONExporter']
