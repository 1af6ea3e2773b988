"""Domain layer: pure task tree models, rules and algorithms."""
