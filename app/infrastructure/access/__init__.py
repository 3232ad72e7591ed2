"""Access adapters: ownership and session resolution."""
