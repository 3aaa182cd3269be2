"""Transport ports."""
