"""Normalization and entity resolution for scraped regulatory enforcement records."""
