"""Build orchestration, page metadata, index and static assets."""
