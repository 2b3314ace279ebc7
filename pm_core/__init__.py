"""Package discovery, routing and dispatch for pmgr."""
