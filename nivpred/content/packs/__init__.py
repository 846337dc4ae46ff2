"""YAML content packs: scoring policies and example snapshots."""
