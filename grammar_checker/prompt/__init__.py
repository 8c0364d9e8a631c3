"""Prompt templates for the grammar checker."""
