"""Metric formatting and text rendering helpers."""
