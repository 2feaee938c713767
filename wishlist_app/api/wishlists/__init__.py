"""Wishlist routes, schemas and services"""
