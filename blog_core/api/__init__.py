"""HTTP API for blog-core (Flask blueprints)."""
