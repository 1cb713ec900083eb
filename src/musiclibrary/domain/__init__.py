"""
Domain layer - media variants, playlists, and their persistence entities.

Variant instances (Song, Podcast) and Playlist are plain dataclasses; the
SQLAlchemy rows in entities.py describe how they are stored.
"""
