"""HTTP middlewares."""
