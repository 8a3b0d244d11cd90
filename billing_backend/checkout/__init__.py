"""
Module 'checkout': sessions Stripe Checkout en mode setup.
"""
