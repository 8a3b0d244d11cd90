"""
Module 'customers': identité de facturation (client Stripe) et dernière sélection.
"""
