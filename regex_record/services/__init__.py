"""Extraction and conversion services."""
