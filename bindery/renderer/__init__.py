"""Shared renderer contract, legend text and interior template writers"""
