"""
Module 'subscriptions': abonnements d'essai (sièges + documents).
"""
