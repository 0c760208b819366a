"""Token rules: one module per rule, registered as `csf-<module-name>`."""
