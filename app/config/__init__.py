"""Settings, protocol constants and exceptions."""
