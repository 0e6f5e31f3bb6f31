"""
Client for the AfiaTrack API with a local-only fallback mode.
"""
