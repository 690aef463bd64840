"""Logging and console helpers."""
