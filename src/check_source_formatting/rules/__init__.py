"""Built-in rule-sets, token rules and their loaders."""
