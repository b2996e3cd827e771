"""Quiz domain services: scoring, room lifecycle, questions and sessions.

These modules hold the game rules and are imported by the HTTP routes,
keeping transport concerns separated from core quiz mechanics. Every
function receives the caller identity explicitly; none of them read the
request context.
"""
