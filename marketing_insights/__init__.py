"""Marketing campaign dashboard: dataset loading and view aggregation."""

__version__ = "0.1.0"
