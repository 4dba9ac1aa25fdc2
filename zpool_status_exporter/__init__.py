"""
zpool-status-exporter: Prometheus metrics from `zpool status` output.
"""

__version__ = "0.4.0"
