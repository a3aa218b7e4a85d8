"""Infrastructure layer: adapters for hashing, tokens, sessions and storage."""
