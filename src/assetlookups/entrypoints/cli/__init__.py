"""ASSETLOOKUPS command-line interface."""
