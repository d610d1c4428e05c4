"""Status item model and menu click dispatch."""
