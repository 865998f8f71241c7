"""
POS engine: order lifecycle and billing for the hotel, restaurant and KTV.
"""
