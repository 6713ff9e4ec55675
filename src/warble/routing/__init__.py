"""Routing: pattern compiler, argument resolver, and route-set validator.

Patterns are compiled once when the app freezes into an immutable
table. Resolution is a pure function over that table.
"""
