"""Shared helpers used across depshare packages."""
