"""Routing — path templates, routes, and the router registry.

Routes are registered during setup; each compiles its path template once
and is matched in registration order at dispatch time.
"""
