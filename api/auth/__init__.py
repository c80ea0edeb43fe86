"""
Tenant resolution from bearer tokens.
"""
