"""Flow algorithms: augmenting path search, max flow, min cut and matching."""
