"""Shared building blocks for MindCare services."""
