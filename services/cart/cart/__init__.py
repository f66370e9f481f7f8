"""Shopping cart: line items, delivery regions and pricing"""
