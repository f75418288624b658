"""Satellite catalogue: browse and edit nested satellite architectures offline."""
