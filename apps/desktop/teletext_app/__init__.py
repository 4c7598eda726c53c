"""Teletext Zero desktop app and command line tools."""
