"""Optional matplotlib helpers (install the ``viz`` extra)."""
