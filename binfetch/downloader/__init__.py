"""
Downloader package for binfetch

Contains:
- release.py: Release API lookup and metadata export
- cache.py: Download cache naming and invalidation
"""
