"""Entry points (CLI) for ASSETLOOKUPS."""
