"""HTTP API for the comic CMS."""
