"""
Page Analyzer package initializer.
Defines package version; the CLI lives in :mod:`page_analyzer.cli`.
"""
__version__ = "0.1.0"
