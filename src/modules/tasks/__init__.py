"""Tasks module: store, claim protocol, status policy, gated operations, dashboard."""
