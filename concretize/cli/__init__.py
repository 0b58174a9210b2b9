"""Command line interface for concretize."""
