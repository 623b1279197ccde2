"""HTTP surface for the article engine."""
