"""Operations behind the MCP tools.

Each module provides async functions that forward arguments to the
``BasecampClient`` (or the ``IndexManager``) and return plain data.  They
raise domain exceptions (``BasecampAPIError``, ``LookupError``,
``ValueError``), never MCP errors -- that translation is the tool layer's
responsibility.
"""
