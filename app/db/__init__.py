"""Persistence: engine/session management, ORM models and name-keyed stores."""
