"""Small helpers shared across weighscope."""
