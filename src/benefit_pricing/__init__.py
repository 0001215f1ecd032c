"""
Benefit Pricing Package

Premium calculation for employee insurance benefits (voluntary life,
long-term disability, commuter). Resolves a monthly price using
Product Type → Rate Table → Employer Contribution → Truncated Price.
"""

__version__ = "1.0.0"
