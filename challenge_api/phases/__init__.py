"""Phase timeline engine.

Resolves timeline templates into dated phase instance lists for new
challenges, reconciles existing lists when a challenge is edited or
activated, closes phases on cancellation, and validates phase references
against the phase catalog.
"""
