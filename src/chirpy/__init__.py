"""Chirpy — a small social-post service.

Users register with email/password, log in for a short-lived access token
plus a long-lived refresh token, post short "chirps" and manage their own.
A payment provider upgrades accounts through an API-key protected webhook.
"""

__version__ = "0.1.0"
