"""Treatments Domain - treatment records linked to appointments"""
