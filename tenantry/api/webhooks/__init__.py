"""Webhook gateway resource."""
