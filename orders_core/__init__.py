"""Core (UI-agnostic) orders view logic.

This package contains:
- the order record model and query state
- the filter -> sort -> paginate pipeline (pure functions)
- selection tracking and the query controller
- data loading (CSV/JSON/XLSX -> pandas -> orders) and export
"""
