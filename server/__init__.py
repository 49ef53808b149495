"""HTTP server for deposit verification."""
