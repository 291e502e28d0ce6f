"""Request pipelines: query normalization and keyword-to-mentor search."""
