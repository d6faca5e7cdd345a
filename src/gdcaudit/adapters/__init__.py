"""Platform entry points translating wire events into analyzer calls."""
