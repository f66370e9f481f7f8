"""Promo codes: storage, validation and usage tracking"""
