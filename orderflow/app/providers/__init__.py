"""Outbound notification providers.

Each provider module exposes ``send(event, payload, target)``.
"""
