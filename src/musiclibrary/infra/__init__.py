"""
Infrastructure layer - database, stores, logging, settings, and errors.
"""
