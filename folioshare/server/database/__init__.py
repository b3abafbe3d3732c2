"""Durable SQL storage for the database backend."""
