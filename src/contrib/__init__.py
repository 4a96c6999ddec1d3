"""Workflow-aware git branch sync, update and cleanup."""
