"""
Pro Sites - Stripe billing for multisite networks
"""

__version__ = '3.6.1'
__license__ = 'GPL-2.0-or-later'
