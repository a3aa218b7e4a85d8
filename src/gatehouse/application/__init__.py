"""Application layer: use-case orchestration over domain and infrastructure."""
