"""
AfiaTrack web application: JSON API over the record store.
"""
