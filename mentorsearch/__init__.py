"""Mentor search service: config, persistence, keyword pipelines, HTTP API.

Turns a free-text search phrase into lookup keywords, with model-based
enrichment and domain heuristics as fallbacks.
"""
