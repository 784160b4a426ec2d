"""Shared type aliases and protocols."""
