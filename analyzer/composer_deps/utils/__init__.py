"""Utility helpers for paths and Composer project metadata."""
