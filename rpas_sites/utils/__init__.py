"""Small shared helpers (ids, timestamps, ring bookkeeping)."""
