from .token_exporter import TokenExporter

__all__ = ['TokenExporter']
