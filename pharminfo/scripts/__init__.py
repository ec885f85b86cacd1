"""
Command-line tools for content generation, validation and link maintenance.

Run with ``python -m pharminfo.scripts.<name>``.
"""
