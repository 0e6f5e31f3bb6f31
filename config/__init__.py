"""
Configuration, models and the record store.
"""
