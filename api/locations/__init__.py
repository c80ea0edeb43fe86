"""
Location store: per-tenant location records, including device ingestion.
"""
