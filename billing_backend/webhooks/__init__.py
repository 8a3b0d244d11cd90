"""
Module 'webhooks': vérification et routage des événements Stripe.
"""
