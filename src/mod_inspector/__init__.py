"""Mod Inspector: error attribution and include-dependency analysis for mod archives."""
