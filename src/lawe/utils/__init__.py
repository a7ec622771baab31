"""Shared utilities for Lawe."""
