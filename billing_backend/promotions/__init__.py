"""
Module 'promotions': résolution des codes promo Stripe.
"""
