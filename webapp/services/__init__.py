"""
Services behind the API routes. Each takes the storage explicitly so the
client can run them against its local store in fallback mode.
"""
