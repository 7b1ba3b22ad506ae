"""Stateful workflows: registration, applications, notifications."""
