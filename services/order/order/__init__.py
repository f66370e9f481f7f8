"""Checkout and order submission"""
