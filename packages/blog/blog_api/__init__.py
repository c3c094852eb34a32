"""Blog API layer: envelope-aware HTTP client plus the admin-gated API service."""
