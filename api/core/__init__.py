"""
Shared, cross-cutting code for the API and the import CLI.

`core/` holds small building blocks that several features use (DB wiring,
settings, error rendering, the USDA client). Feature-specific SQL and logic
stay in the feature package (e.g. `nutrients/`, `foods/`).
"""
