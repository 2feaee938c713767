"""Product routes, schemas and services"""
