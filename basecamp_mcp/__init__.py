"""Basecamp 3 bridge for the Model Context Protocol."""
