"""Routing — ``:param`` pattern matching and the rendered-output cache.

Exact (parameterless) patterns always win over parameterized ones;
parameterized patterns are tried in registration order.
"""
