"""Presentation layer: Textual rendering of the engine's snapshots."""
