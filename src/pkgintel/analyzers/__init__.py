"""Prerelease classification, timeline assembly and maintenance scoring."""
