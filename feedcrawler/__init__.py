"""Periodic frontend article crawler with webhook delivery."""
