"""Routing: a segment tree with O(path-depth) matching.

Nodes are added during setup through ``RouteBuilder`` and the tree is
frozen before the first request is served.
"""
