"""
Backend de facturation Datelia: devis, checkout, abonnements d'essai et webhooks Stripe.
"""
