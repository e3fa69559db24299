"""Domain layer: resource models and field rules, free of HTTP and SQL."""
