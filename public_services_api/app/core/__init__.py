"""
Core infrastructure: settings, logging, errors, the key-value store,
repositories and identity resolution.
"""
