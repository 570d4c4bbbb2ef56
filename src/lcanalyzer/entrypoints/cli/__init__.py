"""Command-line interface for lcanalyzer."""
