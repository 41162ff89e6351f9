"""Adapter around the p4 command-line client: running it, logging in, and parsing its tagged output."""
