"""
Tier Pricing Package

Square-footage pricing for pest-control service profiles.
Resolves a size to a flat price, a legacy "Bundle Total / Component:" bundle
or an additive component bundle from spreadsheet-sourced pricing tiers.
"""

__version__ = "1.0.0"
