"""MCI command line interface."""
