"""
ZFS pool status parsing, classification and metric rendering.
"""
