"""HTTP primitives: Request (frozen), ResponseWriter (mutable), Response (snapshot)."""
