"""
HTTP layer: metrics route, basic auth and middleware.
"""
