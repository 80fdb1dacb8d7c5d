"""Checkout orders service: cart items, archiving and bulk purchase."""
