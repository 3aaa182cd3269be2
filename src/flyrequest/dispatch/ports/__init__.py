"""Dispatcher ports."""
