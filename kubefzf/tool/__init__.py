"""Command line tool for inspecting and populating kubefzf snapshots."""
