"""Miniature and preview generation for videos and playlists.

Operations live in ``thumbnails.builder``; records and options in
``thumbnails.types``.
"""
