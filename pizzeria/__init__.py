"""Pizzeria menu and push-notification API."""
