"""
Module 'notifications': e-mails transactionnels (Resend), best-effort.
"""
