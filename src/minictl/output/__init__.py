"""Render ServiceResult for humans or machines."""
