"""State/store layer.

This package owns the in-memory placement cache and is the only place
where a fetched snapshot is reconciled into it.
"""
