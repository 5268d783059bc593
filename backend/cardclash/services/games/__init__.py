"""Game domain services: deck validation, matchmaking and rounds.

This package contains the pure(ish) game logic that socket handlers and
HTTP routes call into, keeping transport concerns separated from core
game mechanics.
"""
