"""Backoffice: order fulfillment workflow for the e-commerce admin console."""
