"""Boundary adapters: database, image APIs, storage backends and the chain."""
