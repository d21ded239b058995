"""Prompt templates for decade restyling requests."""
