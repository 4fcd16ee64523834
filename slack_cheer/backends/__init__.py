"""Storage and queue backends."""
