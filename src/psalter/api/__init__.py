"""HTTP API serving decoded psalter data and derived statistics."""
