"""Specify any feature flags here"""

from .env import env

# Adds the bitmap based passport attestation next to the per-stamp attestations
FF_PASSPORT_BITMAP_ATTESTATION = env("FF_PASSPORT_BITMAP_ATTESTATION", default="on")
