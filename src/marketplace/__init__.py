"""Marketplace escrow fulfillment service."""
