"""Persistence demo for replacing a one-to-many collection (users and tags)."""
