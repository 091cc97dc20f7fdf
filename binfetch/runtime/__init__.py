"""
Runtime package for binfetch

Contains:
- binaries/: Target resolution, platform toolchains, extraction and installation
"""
