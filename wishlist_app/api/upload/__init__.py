"""Image upload routes"""
